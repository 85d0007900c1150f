"""Error types for chartrepo.

This module defines the error types raised while loading and writing the
repository registry, fetching repository indexes and coordinating access to the
registry file.
"""

from typing import Optional


class ChartRepoError(Exception):
    """Base class for all chartrepo errors.

    This is the parent class for all chartrepo-specific exceptions.
    """

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Error message
        """
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(ChartRepoError):
    """Base class for errors about local configuration files."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            path: Optional path to the file that caused the error
        """
        super().__init__(message)
        self.path = path


class RegistryFileError(ConfigurationError):
    """Raised when the registry file cannot be read, parsed or written.

    Examples:
        >>> try:
        ...     RepositoryFile.load(home.repository_file())
        ... except RegistryFileError as e:
        ...     print(f"Registry file problem at {e.path}: {e}")
    """

    pass


class InvalidRegistryFormatError(RegistryFileError):
    """Raised when the registry file parses but does not have the expected shape."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        expected_type: str = "dict",
    ) -> None:
        """Initialize invalid format error.

        Args:
            message: Error message
            path: Optional path to the registry file
            expected_type: Expected type of the offending node
        """
        super().__init__(message, path)
        self.expected_type = expected_type


class RepositoryError(ChartRepoError):
    """Base class for errors about a single named repository."""

    def __init__(self, message: str, name: str, url: Optional[str] = None) -> None:
        """Initialize repository error.

        Args:
            message: Error message
            name: Repository name
            url: Repository URL, when known
        """
        super().__init__(message)
        self.name = name
        self.url = url


class DuplicateRepositoryError(RepositoryError):
    """Raised when ``no_update`` is set and the name is already registered.

    Examples:
        >>> try:
        ...     add_repository("stable", url, home, no_update=True)
        ... except DuplicateRepositoryError as e:
        ...     print(f"{e.name} is taken")
    """

    pass


class RepositoryNotFoundError(RepositoryError):
    """Raised when a repository name is not present in the registry."""

    pass


class RepositoryUnreachableError(RepositoryError):
    """Raised when a repository index cannot be fetched or is not a valid index.

    The underlying transport or format error is available as ``__cause__``.
    """

    pass


class NetworkError(ChartRepoError):
    """Raised when a transport operation fails.

    Examples:
        >>> try:
        ...     getter.get("https://charts.example.com/index.yaml")
        ... except NetworkError as e:
        ...     print(f"Network error for {e.url}: {e}")
    """

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        """Initialize network error.

        Args:
            message: Error message
            url: Optional URL that was being accessed
        """
        super().__init__(message)
        self.url = url


class UnsupportedSchemeError(NetworkError):
    """Raised when no getter is registered for a URL scheme."""

    def __init__(self, message: str, scheme: str, url: Optional[str] = None) -> None:
        super().__init__(message, url)
        self.scheme = scheme


class InvalidIndexError(ChartRepoError):
    """Raised when fetched content is not a repository index."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class LockError(ChartRepoError):
    """Base class for registry lock errors."""

    def __init__(self, message: str, path: str) -> None:
        """Initialize lock error.

        Args:
            message: Error message
            path: Path of the lock file
        """
        super().__init__(message)
        self.path = path


class LockTimeoutError(LockError):
    """Raised when exclusive access to the registry is not obtained in time.

    Examples:
        >>> try:
        ...     lock.acquire(timeout=30)
        ... except LockTimeoutError as e:
        ...     print(f"Registry busy, gave up after {e.timeout}s")
    """

    def __init__(self, message: str, path: str, timeout: float) -> None:
        super().__init__(message, path)
        self.timeout = timeout


class LockAcquisitionError(LockError):
    """Raised when the lock mechanism fails for a reason other than contention."""

    pass


class CredentialPromptError(ChartRepoError):
    """Raised when a password cannot be read interactively."""

    def __init__(self, message: str, username: Optional[str] = None) -> None:
        super().__init__(message)
        self.username = username
