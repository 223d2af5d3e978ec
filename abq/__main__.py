# -*- coding: utf-8 -*-
"""Allow `python -m abq`."""
from abq.abq import cli

cli()
