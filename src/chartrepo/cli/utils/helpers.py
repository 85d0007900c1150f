"""Helper functions for CLI operations."""

import sys
from typing import Optional

import click

from ...errors import (
    CredentialPromptError,
    DuplicateRepositoryError,
    LockError,
    RegistryFileError,
    RepositoryNotFoundError,
    RepositoryUnreachableError,
)


class ExitCode:
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_USAGE = 2
    REPOSITORY_CONFLICT = 3  # duplicate name or unknown name
    REPOSITORY_UNREACHABLE = 4
    REGISTRY_BUSY = 5
    REGISTRY_FILE_ERROR = 6
    CREDENTIAL_ERROR = 7


def exit_code_for(error: Exception) -> int:
    """Map an error to the exit code the CLI reports for it."""
    if isinstance(error, (DuplicateRepositoryError, RepositoryNotFoundError)):
        return ExitCode.REPOSITORY_CONFLICT
    if isinstance(error, RepositoryUnreachableError):
        return ExitCode.REPOSITORY_UNREACHABLE
    if isinstance(error, LockError):
        return ExitCode.REGISTRY_BUSY
    if isinstance(error, RegistryFileError):
        return ExitCode.REGISTRY_FILE_ERROR
    if isinstance(error, CredentialPromptError):
        return ExitCode.CREDENTIAL_ERROR
    return ExitCode.GENERIC_ERROR


def resolve_format(cli_format: Optional[str] = None, default_tty: str = "table", default_non_tty: str = "json") -> str:
    """Resolve output format with TTY detection.

    Args:
        cli_format: Format specified via CLI flag
        default_tty: Default format for TTY output
        default_non_tty: Default format for non-TTY output

    Returns:
        Resolved format name
    """
    if cli_format:
        return cli_format.lower()

    # Auto-detect based on TTY
    if sys.stdout.isatty():
        return default_tty
    else:
        return default_non_tty


def resolve_log_level(verbose: int = 0, quiet: int = 0, debug: bool = False) -> str:
    """Turn -v/-q counts and --debug into a logging level name."""
    if debug:
        return "DEBUG"
    if verbose > quiet:
        return "DEBUG" if verbose - quiet >= 2 else "INFO"
    if quiet > verbose:
        return "ERROR"
    return "WARNING"


def handle_error(error: Exception, exit_code: Optional[int] = None) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        error: Exception to handle
        exit_code: Exit code to use. Derived from the error type if None.
    """
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(exit_code if exit_code is not None else exit_code_for(error))
