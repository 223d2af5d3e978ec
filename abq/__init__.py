# -*- coding: utf-8 -*-
"""abq: a terminal address book query tool."""
