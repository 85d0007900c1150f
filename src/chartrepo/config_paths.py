"""Home directory layout for chartrepo.

The home directory holds the repository registry file and the cache of fetched
repository indexes. It is resolved from the ``CHARTREPO_HOME`` environment
variable, falling back to the platform user data directory.
"""

import os
from pathlib import Path
from typing import Optional, Union

import platformdirs

# Application name used for directory paths
APP_NAME = "chartrepo"

# Environment variable names
ENV_HOME = "CHARTREPO_HOME"

# Layout below the home directory
REPOSITORY_DIRNAME = "repository"
CACHE_DIRNAME = "cache"
REPOSITORY_FILENAME = "repositories.yaml"
INDEX_FILE_SUFFIX = "-index.yaml"


def get_default_home() -> Path:
    """Get the home directory, respecting the CHARTREPO_HOME override."""
    env_home = os.environ.get(ENV_HOME)
    if env_home:
        return Path(env_home).expanduser()
    return Path(platformdirs.user_data_dir(APP_NAME))


class Home:
    """Paths below a chartrepo home directory."""

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        """Initialize the home layout.

        Args:
            path: Home directory. If None, the default home is used.
        """
        self.path = Path(path).expanduser() if path is not None else get_default_home()

    def __repr__(self) -> str:
        return f"Home({str(self.path)!r})"

    def repository(self) -> Path:
        return self.path / REPOSITORY_DIRNAME

    def repository_file(self) -> Path:
        """Path of the repository registry file."""
        return self.repository() / REPOSITORY_FILENAME

    def cache(self) -> Path:
        """Directory holding cached repository indexes."""
        return self.repository() / CACHE_DIRNAME

    def cache_index(self, name: str) -> Path:
        """Path of the cached index for the repository ``name``."""
        return self.cache() / f"{name}{INDEX_FILE_SUFFIX}"

    def ensure(self) -> None:
        """Create the repository and cache directories if they do not exist.

        Raises:
            OSError: If a directory cannot be created
            PermissionError: If the repository directory exists but is not writable
        """
        self.cache().mkdir(parents=True, exist_ok=True)
        if not os.access(self.repository(), os.W_OK):
            raise PermissionError(f"Repository directory is not writable: {self.repository()}")
