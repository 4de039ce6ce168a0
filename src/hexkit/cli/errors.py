"""
CLI Error Handling
==================

Maps exceptions raised while loading or slicing a HEX image to a message
on stderr and a process exit code. Every hexkit command funnels its
failures through handle_cli_exception.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from hexkit.errors import HexError


class ExitCode(IntEnum):
    """Exit codes of the hexkit command."""
    SUCCESS = 0
    FORMAT_ERROR = 1     # Malformed HEX file, 04 record in a 16-bit view, bad range
    INVALID_ARGS = 2     # Unparseable address or unreadable input file
    INTERNAL_ERROR = 3   # Bug in hexkit


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Print a failed command's error and exit.

    Exit codes:
        FORMAT_ERROR: any HexError. That covers HexSyntaxError,
            MissingTerminatorError and UnsupportedRecordError from the
            assembler, ExtendedAddressPresentError from the linear view,
            and InvalidRangeError from range queries.
        INVALID_ARGS: click.BadParameter, or an input file that cannot
            be opened.
        INTERNAL_ERROR: anything else. With verbose set the traceback
            is printed too.

    Args:
        error: Exception caught by the command
        verbose: Print the traceback of internal errors
        error_type: Label for the message, e.g. "Range" gives "Range error: ..."
    """
    if isinstance(error, HexError):
        # HexFileError text already starts with "source:line: error:"
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.FORMAT_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
