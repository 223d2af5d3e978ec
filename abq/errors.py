# -*- coding: utf-8 -*-
"""abq.errors
License:  MIT
About:
Error reporting helpers.

"""
import sys


def error_exit(errormsg):
    """Print an error message and exit with a status of 1

    Args:
        errormsg (str): the error message to display.

    """
    print(f'ERROR: {errormsg}.', file=sys.stderr)
    sys.exit(1)


def error_pass(errormsg):
    """Print an error message but don't exit.

    Args:
        errormsg (str): the error message to display.

    """
    print(f'ERROR: {errormsg}.', file=sys.stderr)
