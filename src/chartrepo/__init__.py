"""Chart repository registration and index caching.

This package keeps a local registry of chart repositories in a single YAML file
and caches each repository's index. Repositories are validated by fetching
their index before they are recorded, and updates to the shared registry file
are serialized across processes with a file lock.
"""

# Version of the package
try:
    from importlib.metadata import version as _version

    __version__ = _version("chartrepo")
except ImportError:
    raise ImportError(
        "Failed to determine package version. This package requires Python 3.8+ "
        "where importlib.metadata is available, or must be installed as a package."
    )

# Import main components for easier access
from .chart_repository import ChartRepository
from .config_paths import Home
from .errors import (
    ChartRepoError,
    CredentialPromptError,
    DuplicateRepositoryError,
    InvalidIndexError,
    LockAcquisitionError,
    LockTimeoutError,
    NetworkError,
    RegistryFileError,
    RepositoryNotFoundError,
    RepositoryUnreachableError,
)
from .getter import Getter, GetterOptions, Provider, Providers, all_providers
from .index import IndexFile
from .lock import RegistryLock
from .repo_add import RepositoryAddResult, add_repository, list_repositories, remove_repository
from .repo_file import RepositoryEntry, RepositoryFile

# Define public API
__all__ = [
    # Registration
    "add_repository",
    "remove_repository",
    "list_repositories",
    "RepositoryAddResult",
    # Registry store
    "RepositoryEntry",
    "RepositoryFile",
    "RegistryLock",
    "Home",
    # Repositories and transports
    "ChartRepository",
    "IndexFile",
    "Getter",
    "GetterOptions",
    "Provider",
    "Providers",
    "all_providers",
    # Errors
    "ChartRepoError",
    "CredentialPromptError",
    "DuplicateRepositoryError",
    "InvalidIndexError",
    "LockAcquisitionError",
    "LockTimeoutError",
    "NetworkError",
    "RegistryFileError",
    "RepositoryNotFoundError",
    "RepositoryUnreachableError",
]
