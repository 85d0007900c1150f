"""JSON output formatter for CLI."""

import datetime as _dt
import json
import sys
from enum import Enum as _Enum
from typing import Any, Dict, List, Optional, TextIO

from ...repo_file import RepositoryEntry


def _default_serializer(obj: Any) -> Any:
    """Serialize otherwise non-JSON-serializable objects.

    - datetime/date -> ISO 8601 string
    - Enum -> value (fallback to name)
    - Fallback -> str(obj)
    """
    if isinstance(obj, (_dt.datetime, _dt.date)):
        return obj.isoformat()
    if isinstance(obj, _Enum):
        return getattr(obj, "value", obj.name)
    return str(obj)


def format_json(data: Any, output: Optional[TextIO] = None, indent: int = 2) -> None:
    """Format data as JSON and write to output.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
        indent: JSON indentation level
    """
    if output is None:
        output = sys.stdout

    json.dump(
        data,
        output,
        indent=indent,
        ensure_ascii=False,
        sort_keys=True,
        default=_default_serializer,
    )
    output.write("\n")


def format_entry_json(entry: RepositoryEntry) -> Dict[str, Any]:
    """Format a repository entry for JSON output. The password is never shown."""
    return {
        "name": entry.name,
        "url": entry.url,
        "cache": entry.cache,
        "username": entry.username,
        "has_password": bool(entry.password),
        "cert_file": entry.cert_file,
        "key_file": entry.key_file,
        "ca_file": entry.ca_file,
    }


def format_repositories_json(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Format repository list rows for JSON output.

    Args:
        rows: Rows with ``entry`` and ``charts`` keys

    Returns:
        Formatted data structure
    """
    repositories = [{**format_entry_json(row["entry"]), "charts": row["charts"]} for row in rows]
    return {"repositories": repositories, "count": len(repositories)}
