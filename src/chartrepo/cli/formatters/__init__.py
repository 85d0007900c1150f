"""CLI formatters package."""

from .json import format_entry_json, format_json, format_repositories_json
from .table import create_console, format_repositories_table

__all__ = [
    "format_json",
    "format_entry_json",
    "format_repositories_json",
    "create_console",
    "format_repositories_table",
]
