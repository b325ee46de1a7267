"""Advisory reader/writer lock on a sibling lock file (flock).

Only processes that go through FileLock on the same path are excluded;
anything writing the data file directly is not.
"""

from __future__ import annotations

import contextlib
import fcntl
import os
from enum import Enum
from pathlib import Path

LOCK_SUFFIX = ".lck"


class LockMode(Enum):
    SHARED = "shared"
    EXCLUSIVE = "exclusive"


_FLOCK_OPS = {
    LockMode.SHARED: fcntl.LOCK_SH,
    LockMode.EXCLUSIVE: fcntl.LOCK_EX,
}


def lock_path_for(path: Path) -> Path:
    return path.with_name(path.name + LOCK_SUFFIX)


class FileLock:
    """Non-blocking flock on a lock file, opened on demand."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._fd: int | None = None
        self._mode: LockMode | None = None

    @property
    def locked(self) -> bool:
        return self._mode is not None

    @property
    def mode(self) -> LockMode | None:
        return self._mode

    def try_acquire_exclusive(self) -> bool:
        return self._try_acquire(LockMode.EXCLUSIVE)

    def try_acquire_shared(self) -> bool:
        return self._try_acquire(LockMode.SHARED)

    def try_acquire(self, mode: LockMode) -> bool:
        return self._try_acquire(mode)

    def _try_acquire(self, mode: LockMode) -> bool:
        """Return False if another holder conflicts; never waits.

        A lock taken on a file that was unlinked (or replaced) after we
        opened it guards nothing, so it is dropped and reported as busy.
        """
        if self._fd is None:
            self._fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            fcntl.flock(self._fd, _FLOCK_OPS[mode] | fcntl.LOCK_NB)
        except BlockingIOError:
            if self._mode is None:
                self._close_fd()
            return False
        if not self._is_current_file():
            fcntl.flock(self._fd, fcntl.LOCK_UN)
            self._mode = None
            self._close_fd()
            return False
        self._mode = mode
        return True

    def release(self) -> None:
        """Unlock and close the descriptor. No-op when nothing is held."""
        if self._fd is None:
            return
        try:
            if self._mode is not None:
                fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            self._mode = None
            self._close_fd()

    def remove(self) -> bool:
        """Unlink the lock file while holding it exclusively.

        Returns False, leaving the file alone, when another handle holds it;
        that holder removes it on its own close.
        """
        if not self._try_acquire(LockMode.EXCLUSIVE):
            return False
        try:
            with contextlib.suppress(FileNotFoundError):
                self.path.unlink()
        finally:
            self.release()
        return True

    def _is_current_file(self) -> bool:
        try:
            on_disk = os.stat(self.path)
        except FileNotFoundError:
            return False
        held = os.fstat(self._fd)
        return (held.st_ino, held.st_dev) == (on_disk.st_ino, on_disk.st_dev)

    def _close_fd(self) -> None:
        fd, self._fd = self._fd, None
        if fd is not None:
            os.close(fd)

    def __repr__(self) -> str:
        state = self._mode.value if self._mode else "unlocked"
        return f"FileLock({str(self.path)!r}, {state})"
