"""CLI utilities package."""

from .helpers import (
    ExitCode,
    exit_code_for,
    handle_error,
    resolve_format,
    resolve_log_level,
)

__all__ = [
    "ExitCode",
    "exit_code_for",
    "handle_error",
    "resolve_format",
    "resolve_log_level",
]
