"""Registering and removing chart repositories.

Adding a repository runs in two phases. First, without any lock, the registry
is read for a quick duplicate check and the remote index is fetched and
validated; this is the slow, network-bound part. Then, holding the registry
lock, the registry file is read again, the new entry is merged in and the file
is written back. Re-reading under the lock is what keeps concurrent additions
of different names from overwriting each other.

The duplicate check of the first phase is advisory. Two concurrent additions
of the same new name with ``no_update`` can both pass it; both then succeed and
the one that writes last wins.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .chart_repository import INDEX_FETCH_ERRORS, ChartRepository
from .config_paths import Home
from .credentials import PasswordReader, resolve_password
from .errors import (
    DuplicateRepositoryError,
    LockError,
    LockTimeoutError,
    RegistryFileError,
    RepositoryNotFoundError,
    RepositoryUnreachableError,
)
from .getter import Providers
from .lock import DEFAULT_LOCK_TIMEOUT, DEFAULT_POLL_INTERVAL, RegistryLock
from .logging import LogEvent, log_debug, log_info
from .repo_file import DEFAULT_FILE_MODE, RepositoryEntry, RepositoryFile

HomeArg = Optional[Union[Home, str, Path]]


class AddState(str, Enum):
    """Progress of one add_repository call."""

    INIT = "init"
    VALIDATING = "validating"
    VALIDATED = "validated"
    VALIDATION_FAILED = "validation_failed"
    LOCKING = "locking"
    LOCKED = "locked"
    LOCK_TIMEOUT = "lock_timeout"
    LOCK_FAILED = "lock_failed"
    MERGING = "merging"
    WRITING = "writing"
    WRITE_FAILED = "write_failed"
    COMMITTED = "committed"


@dataclass
class RepositoryAddResult:
    """Result of a committed add_repository call."""

    entry: RepositoryEntry
    replaced: bool
    chart_count: int


def _home(home: HomeArg) -> Home:
    return home if isinstance(home, Home) else Home(home)


def _ensure_home(home: Home) -> None:
    try:
        home.ensure()
    except OSError as e:
        raise RegistryFileError(f"failed to prepare home directory {home.path}: {e}", str(home.repository())) from e


def _state(state: AddState, name: str) -> None:
    log_debug(LogEvent.REGISTRY_UPDATE, "Add repository state changed", repository=name, state=state.value)


@contextmanager
def registry_lock(
    path: Union[str, Path],
    timeout: float = DEFAULT_LOCK_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> Iterator[RegistryLock]:
    """Hold the registry lock for ``path`` for the duration of the block.

    Raises:
        LockTimeoutError: If the lock is not obtained within ``timeout`` seconds
        LockAcquisitionError: If locking fails for a reason other than contention
    """
    lock = RegistryLock(path)
    lock.acquire(timeout=timeout, poll_interval=poll_interval)
    try:
        yield lock
    finally:
        lock.release()


def add_repository(
    name: str,
    url: str,
    home: HomeArg = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    cert_file: Optional[str] = None,
    key_file: Optional[str] = None,
    ca_file: Optional[str] = None,
    no_update: bool = False,
    getters: Optional[Providers] = None,
    password_reader: Optional[PasswordReader] = None,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> RepositoryAddResult:
    """Validate a chart repository and record it in the registry.

    Args:
        name: Repository name, unique within the registry
        url: Repository URL; its ``index.yaml`` must be reachable
        home: Home directory holding the registry. Defaults to the configured home.
        username: Basic auth username
        password: Basic auth password. Read with ``password_reader`` when a
            username is given without one.
        cert_file: Client certificate for TLS
        key_file: Client key for TLS
        ca_file: CA bundle used to verify the server
        no_update: Fail if the name is already registered
        getters: Transports to fetch the index with
        password_reader: Callable returning a password; defaults to a terminal prompt
        lock_timeout: Seconds to wait for exclusive access to the registry
        poll_interval: Seconds between lock attempts

    Returns:
        The committed entry, whether it replaced an existing one, and the
        number of charts in the fetched index

    Raises:
        DuplicateRepositoryError: If ``no_update`` is set and the name exists
        CredentialPromptError: If the password cannot be read
        RepositoryUnreachableError: If the index cannot be fetched or is invalid
        LockTimeoutError: If the registry stays locked past ``lock_timeout``
        LockAcquisitionError: If the lock cannot be taken for another reason
        RegistryFileError: If the registry cannot be read or written
    """
    home = _home(home)
    repo_file = home.repository_file()
    _state(AddState.INIT, name)

    registry = RepositoryFile.load(repo_file)
    if no_update and registry.has(name):
        raise DuplicateRepositoryError(
            f"repository name ({name}) already exists, please specify a different name", name, url
        )

    password = resolve_password(username, password, password_reader)
    entry = RepositoryEntry(
        name=name,
        url=url,
        cache=str(home.cache_index(name)),
        username=username or None,
        password=password or None,
        cert_file=cert_file or None,
        key_file=key_file or None,
        ca_file=ca_file or None,
    )

    _ensure_home(home)
    _state(AddState.VALIDATING, name)
    try:
        index = ChartRepository(entry, getters).download_index_file(home.cache())
    except INDEX_FETCH_ERRORS as e:
        _state(AddState.VALIDATION_FAILED, name)
        raise RepositoryUnreachableError(
            f"Looks like {url!r} is not a valid chart repository or cannot be reached: {e}", name, url
        ) from e
    _state(AddState.VALIDATED, name)

    _state(AddState.LOCKING, name)
    lock = RegistryLock(repo_file)
    try:
        lock.acquire(timeout=lock_timeout, poll_interval=poll_interval)
    except LockTimeoutError:
        _state(AddState.LOCK_TIMEOUT, name)
        raise
    except LockError:
        _state(AddState.LOCK_FAILED, name)
        raise
    try:
        _state(AddState.LOCKED, name)
        # Another process may have committed since the first read.
        registry = RepositoryFile.load(repo_file)
        _state(AddState.MERGING, name)
        replaced = registry.has(name)
        registry.update(entry)
        _state(AddState.WRITING, name)
        try:
            registry.write(repo_file, DEFAULT_FILE_MODE)
        except RegistryFileError:
            _state(AddState.WRITE_FAILED, name)
            raise
    finally:
        lock.release()

    _state(AddState.COMMITTED, name)
    log_info(
        LogEvent.REGISTRY_UPDATE,
        "Repository updated" if replaced else "Repository added",
        repository=name,
        url=url,
        path=str(repo_file),
    )
    return RepositoryAddResult(entry=entry, replaced=replaced, chart_count=index.chart_count)


def remove_repository(
    name: str,
    home: HomeArg = None,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> RepositoryEntry:
    """Remove a repository from the registry and delete its cached index.

    Returns:
        The removed entry

    Raises:
        RepositoryNotFoundError: If no repository has that name
        LockTimeoutError: If the registry stays locked past ``lock_timeout``
        LockAcquisitionError: If the lock cannot be taken for another reason
        RegistryFileError: If the registry or the cached index cannot be updated
    """
    home = _home(home)
    repo_file = home.repository_file()
    _ensure_home(home)

    with registry_lock(repo_file, timeout=lock_timeout, poll_interval=poll_interval):
        registry = RepositoryFile.load(repo_file)
        entry = registry.get(name)
        if entry is None:
            raise RepositoryNotFoundError(f"no repo named {name!r} found", name)
        registry.remove(name)
        registry.write(repo_file, DEFAULT_FILE_MODE)

    cache = Path(entry.cache) if entry.cache else home.cache_index(name)
    if not cache.is_absolute():
        cache = home.cache() / cache
    try:
        cache.unlink(missing_ok=True)
    except OSError as e:
        raise RegistryFileError(f"removed {name!r} but failed to delete its cached index: {e}", str(cache)) from e

    log_info(LogEvent.REGISTRY_UPDATE, "Repository removed", repository=name, path=str(repo_file))
    return entry


def list_repositories(home: HomeArg = None) -> List[RepositoryEntry]:
    """Return the registered repositories in registry order."""
    return list(RepositoryFile.load(_home(home).repository_file()))
