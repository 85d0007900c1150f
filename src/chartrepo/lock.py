"""Cross-process lock guarding the repository registry file.

The lock is an advisory OS file lock on a sidecar ``<registry>.lock`` file.
The registry file itself is replaced by rename on every write, so locking its
inode would not serialize later writers.
"""

import errno
import os
import platform
import time
from pathlib import Path
from types import TracebackType
from typing import Optional, Type, Union

from .errors import LockAcquisitionError, LockTimeoutError
from .logging import LogEvent, log_debug

if platform.system() == "Windows":
    import msvcrt

    fcntl = None
else:
    import fcntl

    msvcrt = None

DEFAULT_LOCK_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 1.0
LOCK_SUFFIX = ".lock"

# errno values that mean "held by someone else"
_CONTENTION_ERRNOS = {errno.EAGAIN, errno.EWOULDBLOCK, errno.EACCES, getattr(errno, "EDEADLK", errno.EACCES)}


def lock_path_for(path: Union[str, Path]) -> Path:
    """Path of the lock file guarding ``path``."""
    path = Path(path)
    return path.with_name(path.name + LOCK_SUFFIX)


class RegistryLock:
    """Exclusive lock scoped to a file path, shared by all processes on the host.

    Each instance owns its own open file, so two instances in one process
    exclude each other as well.

    Examples:
        >>> lock = RegistryLock(home.repository_file())
        >>> lock.acquire(timeout=30, poll_interval=1)
        >>> try:
        ...     ...
        ... finally:
        ...     lock.release()
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """Create a lock for ``path``. Nothing is opened until the first attempt."""
        self.target = Path(path)
        self.path = lock_path_for(self.target)
        self._fd: Optional[int] = None
        self._locked = False

    @property
    def locked(self) -> bool:
        return self._locked

    def _open(self) -> int:
        if self._fd is None:
            try:
                self._fd = os.open(str(self.path), os.O_RDWR | os.O_CREAT, 0o644)
            except OSError as e:
                raise LockAcquisitionError(f"failed to open lock file {self.path}: {e}", str(self.path)) from e
        return self._fd

    def _close(self) -> None:
        if self._fd is not None:
            fd, self._fd = self._fd, None
            os.close(fd)

    def try_lock(self) -> bool:
        """Attempt to take the lock without waiting.

        Returns:
            True if the lock is now held, False if another holder has it

        Raises:
            LockAcquisitionError: If locking fails for a reason other than contention
        """
        if self._locked:
            return True
        fd = self._open()
        try:
            if fcntl is not None:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            else:
                os.lseek(fd, 0, os.SEEK_SET)
                msvcrt.locking(fd, msvcrt.LK_NBLCK, 1)  # type: ignore[union-attr]
        except OSError as e:
            if e.errno in _CONTENTION_ERRNOS:
                return False
            self._close()
            raise LockAcquisitionError(f"failed to lock {self.path}: {e}", str(self.path)) from e
        self._locked = True
        return True

    def acquire(self, timeout: float = DEFAULT_LOCK_TIMEOUT, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        """Take the lock, polling until ``timeout`` seconds have passed.

        Raises:
            LockTimeoutError: If the lock is still held elsewhere at the deadline
            LockAcquisitionError: If locking fails for a reason other than contention
        """
        deadline = time.monotonic() + timeout
        while True:
            if self.try_lock():
                log_debug(LogEvent.REGISTRY_LOCK, "Registry lock acquired", path=str(self.path))
                return
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self._close()
                raise LockTimeoutError(
                    f"timed out after {timeout:g}s waiting for exclusive access to {self.target}; "
                    "another process is updating the repository file",
                    str(self.path),
                    timeout,
                )
            log_debug(LogEvent.REGISTRY_LOCK, "Registry lock busy, waiting", path=str(self.path))
            time.sleep(min(poll_interval, remaining))

    def release(self) -> None:
        """Release the lock and close the lock file. Safe to call when not held."""
        if self._fd is None:
            return
        try:
            if self._locked:
                if fcntl is not None:
                    fcntl.flock(self._fd, fcntl.LOCK_UN)
                else:
                    os.lseek(self._fd, 0, os.SEEK_SET)
                    msvcrt.locking(self._fd, msvcrt.LK_UNLCK, 1)  # type: ignore[union-attr]
                log_debug(LogEvent.REGISTRY_LOCK, "Registry lock released", path=str(self.path))
        finally:
            self._locked = False
            self._close()

    def __enter__(self) -> "RegistryLock":
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.release()
