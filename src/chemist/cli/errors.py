"""
Unified CLI Error Handling
==========================

Single top-level handler that turns any exception escaping a command
into one diagnostic on stderr and a non-zero exit code.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Compilation or assembly error
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report `error` and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: Show source context for compiler errors and a
                 traceback for internal errors

    Raises:
        SystemExit: Always
    """
    from chemist.errors import ChemistError
    from chemist.minic.errors import MiniCError

    if isinstance(error, MiniCError):
        # Already formatted with the "error:" prefix
        click.echo(error.format_detailed() if verbose else str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, ChemistError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
