"""Chart repository index parsing and validation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import InvalidIndexError

INDEX_FILENAME = "index.yaml"


@dataclass
class IndexFile:
    """A parsed repository index: chart name to its published versions."""

    api_version: str
    entries: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    generated: Optional[str] = None

    @property
    def chart_count(self) -> int:
        return len(self.entries)

    def chart_names(self) -> List[str]:
        return sorted(self.entries)

    @classmethod
    def load(cls, content: Union[bytes, str], source: Optional[str] = None) -> "IndexFile":
        """Parse and validate index content.

        Args:
            content: Raw index document
            source: URL or path the content came from, for error messages

        Returns:
            The parsed index

        Raises:
            InvalidIndexError: If the content is not a repository index
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise InvalidIndexError(f"failed to parse index: {e}", source) from e

        if not isinstance(data, dict):
            raise InvalidIndexError("index is not a YAML mapping", source)

        api_version = data.get("apiVersion")
        if not api_version:
            raise InvalidIndexError("no API version specified", source)

        entries = data.get("entries") or {}
        if not isinstance(entries, dict):
            raise InvalidIndexError("'entries' must map chart names to versions", source)
        for chart, versions in entries.items():
            if not isinstance(versions, list):
                raise InvalidIndexError(f"versions of chart {chart!r} must be a list", source)

        generated = data.get("generated")
        return cls(
            api_version=str(api_version),
            entries={str(k): v for k, v in entries.items()},
            generated=str(generated) if generated is not None else None,
        )

    @classmethod
    def load_file(cls, path: Union[str, Path]) -> "IndexFile":
        """Load a cached index from disk.

        Raises:
            OSError: If the file cannot be read
            InvalidIndexError: If the file is not a repository index
        """
        path = Path(path)
        return cls.load(path.read_bytes(), str(path))
