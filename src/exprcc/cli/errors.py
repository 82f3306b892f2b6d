"""
CLI Error Handling
==================

Provides consistent error reporting and exit codes for the CLI.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit codes of the exprcc command (not of the compiled program)."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Lex or parse error: nothing was generated
    INVALID_ARGS = 2     # Invalid arguments or unwritable output
    INTERNAL_ERROR = 3   # Unexpected internal error
    TOOLCHAIN_ERROR = 4  # External assembler, linker or program run failed (--run)


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception on stderr and exit with the matching code.

    Args:
        error: The exception that was raised
        verbose: If True, print the traceback for internal errors

    Raises:
        SystemExit: Always
    """
    from exprcc.errors import CodeGenError, CompileError, ToolchainError

    if isinstance(error, CodeGenError):
        # A well-formed tree never fails codegen
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)

    elif isinstance(error, CompileError):
        # Already formatted with location, caret and hint
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, ToolchainError):
        click.echo(f"Toolchain error: {error}", err=True)
        sys.exit(ExitCode.TOOLCHAIN_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
