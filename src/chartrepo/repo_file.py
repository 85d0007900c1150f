"""Repository registry file.

The registry is a single YAML document listing every known chart repository:

    apiVersion: v1
    generated: "2026-10-19T10:00:00+00:00"
    repositories:
    - name: stable
      cache: /home/user/.local/share/chartrepo/repository/cache/stable-index.yaml
      url: https://charts.example.com
      ...

A :class:`RepositoryFile` is a short-lived in-memory projection of that file.
Callers load it, mutate it and write it back; it is never kept between
operations.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import yaml

from .errors import InvalidRegistryFormatError, RegistryFileError
from .fileutil import atomic_write
from .logging import LogEvent, log_debug, log_warning

API_VERSION = "v1"
DEFAULT_FILE_MODE = 0o644


@dataclass
class RepositoryEntry:
    """Connection, credential and cache metadata for one chart repository."""

    name: str
    url: str
    cache: str = ""
    username: Optional[str] = None
    password: Optional[str] = None
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Serialize using the registry file's field names.

        Unset optional fields are written as empty strings.
        """
        return {
            "name": self.name,
            "cache": self.cache,
            "url": self.url,
            "username": self.username or "",
            "password": self.password or "",
            "certFile": self.cert_file or "",
            "keyFile": self.key_file or "",
            "caFile": self.ca_file or "",
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositoryEntry":
        """Build an entry from a registry file record.

        Raises:
            ValueError: If the record has no name or url
        """
        name = data.get("name")
        url = data.get("url")
        if not name or not url:
            raise ValueError("repository entry requires both 'name' and 'url'")

        def _optional(key: str) -> Optional[str]:
            value = data.get(key)
            return str(value) if value else None

        return cls(
            name=str(name),
            url=str(url),
            cache=str(data.get("cache") or ""),
            username=_optional("username"),
            password=_optional("password"),
            cert_file=_optional("certFile"),
            key_file=_optional("keyFile"),
            ca_file=_optional("caFile"),
        )


class RepositoryFile:
    """Ordered collection of repository entries keyed by name."""

    def __init__(self, repositories: Optional[List[RepositoryEntry]] = None) -> None:
        self.api_version = API_VERSION
        self.generated: Optional[str] = None
        self.repositories: List[RepositoryEntry] = []
        if repositories:
            self.update(*repositories)

    def __len__(self) -> int:
        return len(self.repositories)

    def __iter__(self) -> Iterator[RepositoryEntry]:
        return iter(self.repositories)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "RepositoryFile":
        """Load a registry file.

        A missing file is the first-run case and yields an empty registry.

        Args:
            path: Path to the registry file

        Returns:
            The loaded registry

        Raises:
            RegistryFileError: If the file cannot be read or parsed
            InvalidRegistryFormatError: If the file does not describe a registry
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            log_debug(LogEvent.REPOSITORY_REGISTRY, "Registry file not found, starting empty", path=str(path))
            return cls()
        except OSError as e:
            raise RegistryFileError(f"failed to read repository file {path}: {e}", str(path)) from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise RegistryFileError(f"failed to parse repository file {path}: {e}", str(path)) from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise InvalidRegistryFormatError(
                f"invalid repository file {path}: expected a mapping, got {type(data).__name__}",
                str(path),
            )

        if "apiVersion" not in data and "repositories" not in data:
            return cls._load_legacy(data, path)

        records = data.get("repositories") or []
        if not isinstance(records, list):
            raise InvalidRegistryFormatError(
                f"invalid repository file {path}: 'repositories' must be a list",
                str(path),
                expected_type="list",
            )

        registry = cls()
        registry.api_version = str(data.get("apiVersion") or API_VERSION)
        generated = data.get("generated")
        registry.generated = str(generated) if generated is not None else None
        for record in records:
            if not isinstance(record, dict):
                raise InvalidRegistryFormatError(
                    f"invalid repository file {path}: each repository must be a mapping",
                    str(path),
                )
            try:
                registry.update(RepositoryEntry.from_dict(record))
            except ValueError as e:
                raise InvalidRegistryFormatError(f"invalid repository file {path}: {e}", str(path)) from e
        return registry

    @classmethod
    def _load_legacy(cls, data: Dict[Any, Any], path: Path) -> "RepositoryFile":
        # Very old registries were a plain ``name: url`` mapping.
        if not all(isinstance(v, str) for v in data.values()):
            raise InvalidRegistryFormatError(f"invalid repository file {path}: missing apiVersion", str(path))
        log_warning(
            LogEvent.REPOSITORY_REGISTRY,
            "Repository file is out of date, it will be rewritten on the next update",
            path=str(path),
        )
        return cls([RepositoryEntry(name=str(name), url=url) for name, url in data.items()])

    def has(self, name: str) -> bool:
        """Return True if a repository named ``name`` is registered."""
        return self.get(name) is not None

    def get(self, name: str) -> Optional[RepositoryEntry]:
        for entry in self.repositories:
            if entry.name == name:
                return entry
        return None

    def update(self, *entries: RepositoryEntry) -> None:
        """Insert or replace entries by name.

        A replaced entry keeps its position; new entries are appended.
        """
        for entry in entries:
            for i, existing in enumerate(self.repositories):
                if existing.name == entry.name:
                    self.repositories[i] = entry
                    break
            else:
                self.repositories.append(entry)

    def remove(self, name: str) -> bool:
        """Remove the repository named ``name``.

        Returns:
            True if an entry was removed
        """
        for i, entry in enumerate(self.repositories):
            if entry.name == name:
                del self.repositories[i]
                return True
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "generated": self.generated,
            "repositories": [entry.to_dict() for entry in self.repositories],
        }

    def write(self, path: Union[str, Path], mode: int = DEFAULT_FILE_MODE) -> None:
        """Write the registry to ``path``, replacing the previous file atomically.

        Raises:
            RegistryFileError: If the file cannot be written
        """
        path = Path(path)
        self.generated = datetime.now(timezone.utc).isoformat()
        content = yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)
        try:
            atomic_write(path, content.encode("utf-8"), mode)
        except OSError as e:
            raise RegistryFileError(f"failed to write repository file {path}: {e}", str(path)) from e
        log_debug(
            LogEvent.REPOSITORY_REGISTRY,
            "Repository file written",
            path=str(path),
            repositories=len(self.repositories),
        )
