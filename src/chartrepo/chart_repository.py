"""A chart repository described by a registry entry."""

from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse, urlunparse

from .errors import InvalidIndexError, NetworkError
from .fileutil import atomic_write
from .getter import Getter, GetterOptions, Providers, all_providers
from .index import INDEX_FILENAME, IndexFile
from .logging import LogEvent, log_info
from .repo_file import RepositoryEntry

INDEX_FILE_MODE = 0o644


class ChartRepository:
    """Client for one chart repository."""

    def __init__(self, entry: RepositoryEntry, getters: Optional[Providers] = None) -> None:
        """Create a repository client.

        Args:
            entry: Registry entry describing the repository
            getters: Providers to choose the transport from. Defaults to
                :func:`~chartrepo.getter.all_providers`.

        Raises:
            UnsupportedSchemeError: If no getter handles the entry's URL scheme
        """
        self.entry = entry
        options = GetterOptions(
            username=entry.username,
            password=entry.password,
            cert_file=entry.cert_file,
            key_file=entry.key_file,
            ca_file=entry.ca_file,
        )
        self.client: Getter = (getters if getters is not None else all_providers()).for_url(entry.url, options)

    def index_url(self) -> str:
        """URL of the repository's ``index.yaml``, keeping any query string."""
        parsed = urlparse(self.entry.url)
        path = parsed.path.rstrip("/") + "/" + INDEX_FILENAME
        return urlunparse(parsed._replace(path=path))

    def cache_path(self, cache_dir: Union[str, Path]) -> Path:
        """Where the index is cached; relative entry paths resolve against ``cache_dir``."""
        cache = Path(self.entry.cache or f"{self.entry.name}-{INDEX_FILENAME}")
        if cache.is_absolute():
            return cache
        return Path(cache_dir) / cache

    def download_index_file(self, cache_dir: Union[str, Path]) -> IndexFile:
        """Fetch, validate and cache the repository index.

        Args:
            cache_dir: Index cache directory

        Returns:
            The parsed index

        Raises:
            NetworkError: If the index cannot be fetched
            InvalidIndexError: If the content is not an index
            OSError: If the index cannot be written to the cache
        """
        url = self.index_url()
        content = self.client.get(url)
        index = IndexFile.load(content, url)

        target = self.cache_path(cache_dir)
        target.parent.mkdir(parents=True, exist_ok=True)
        atomic_write(target, content, INDEX_FILE_MODE)
        log_info(
            LogEvent.INDEX_FETCH,
            "Repository index cached",
            repository=self.entry.name,
            url=url,
            path=str(target),
            charts=index.chart_count,
        )
        return index


# Errors from download_index_file that mean the source is not usable.
INDEX_FETCH_ERRORS = (NetworkError, InvalidIndexError, OSError)
