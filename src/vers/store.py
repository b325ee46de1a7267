"""EntryStore: the version file plus its lock, read and written as one document.

    with EntryStore.open("versions.json", create=True) as store:
        store.add("app", Version(prefix="v", major=1, minor=2, patch=3))
        store.write()
        store.bump("app", "minor")     # v1.3.0, history holds v1.2.3
        store.undo("app")              # back to v1.2.3

Locking: every disk access goes through a non-blocking flock on
"<path>.lck", retried every RETRY_INTERVAL seconds up to a per-call budget.
read() takes a shared lock; write(), set(), bump(), undo() and delete() take
the exclusive lock. set/bump/undo/delete reload the file, change it and write
it back while holding that one lock.

add() and remove() only touch the in-memory document; call write() to
persist them.
"""

from __future__ import annotations

import logging
import os
import stat
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from vers.codec import Format, decode, encode
from vers.errors import (
    EntryNotFoundError,
    InvalidArgumentError,
    LockTimeoutError,
    NoHistoryError,
    StoreClosedError,
)
from vers.lock import FileLock, LockMode, lock_path_for
from vers.models import BumpPart, Document, Version

if TYPE_CHECKING:
    from collections.abc import Iterator

log = logging.getLogger("vers.store")

RETRY_INTERVAL = 0.1
READ_RETRIES = 10
WRITE_RETRIES = 3
UPDATE_RETRIES = 10


class EntryStore:
    """A version file opened for reading and updating."""

    def __init__(self, path: Path, fmt: Format) -> None:
        self._path = path
        self._format = fmt
        self._lock = FileLock(lock_path_for(path))
        self._closed = False
        self.document = Document()

    @classmethod
    def open(cls, path: Path | str, *, create: bool = False) -> EntryStore:
        """Bind to a version file; with create=True a missing file is created empty."""
        p = Path(path).resolve()
        fmt = Format.from_path(p)
        if create:
            p.touch(mode=0o644, exist_ok=True)
        elif not p.exists():
            msg = f"version file not found: {p}"
            raise FileNotFoundError(msg)
        if not p.is_file():
            msg = f"version file is not a regular file: {p}"
            raise IsADirectoryError(msg)
        store = cls(p, fmt)
        log.debug("open: path=%s lock=%s format=%s", p, store.lock_path, fmt.value)
        return store

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def lock_path(self) -> Path:
        return self._lock.path

    @property
    def format(self) -> Format:
        return self._format

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # In-memory edits
    # ------------------------------------------------------------------

    def get(self, name: str) -> Version:
        try:
            return self.document.versions[name]
        except KeyError:
            raise EntryNotFoundError(name) from None

    def add(self, name: str, version: Version) -> None:
        """Add or replace an entry; a replaced value becomes its history."""
        log.debug("add: entry=%s version=%r", name, version)
        current = self.document.versions.get(name)
        if current is not None:
            self.document.history[name] = current
        self.document.versions[name] = version

    def remove(self, name: str) -> None:
        self.document.versions.pop(name, None)
        self.document.history.pop(name, None)

    # ------------------------------------------------------------------
    # Disk access
    # ------------------------------------------------------------------

    def read(self, retries: int = READ_RETRIES) -> Document:
        """Reload the document from disk under a shared lock."""
        with self._locked(LockMode.SHARED, retries):
            self.document = self._load()
        return self.document

    def write(self, retries: int = WRITE_RETRIES) -> None:
        """Persist the in-memory document under the exclusive lock."""
        with self._locked(LockMode.EXCLUSIVE, retries):
            self._save()

    def set(self, name: str, version: Version, retries: int = UPDATE_RETRIES) -> None:
        """Read, add and write as one critical section."""
        with self._locked(LockMode.EXCLUSIVE, retries):
            self.document = self._load()
            self.add(name, version)
            self._save()

    def bump(self, name: str, part: BumpPart | str, retries: int = UPDATE_RETRIES) -> Version:
        """Increment major, minor or patch of an entry. Returns the new version."""
        try:
            part = BumpPart(part)
        except ValueError:
            msg = f"invalid bump setting {part!r}; expected one of: major, minor, patch"
            raise InvalidArgumentError(msg) from None

        with self._locked(LockMode.EXCLUSIVE, retries):
            self.document = self._load()
            current = self.get(name)
            bumped = current.bumped(part)
            self.document.history[name] = current
            self.document.versions[name] = bumped
            self._save()
        log.debug("bump: entry=%s %s -> %s", name, current, bumped)
        return bumped

    def undo(self, name: str, retries: int = UPDATE_RETRIES) -> Version:
        """Restore the previous version of an entry. Only one step is kept."""
        with self._locked(LockMode.EXCLUSIVE, retries):
            self.document = self._load()
            self.get(name)
            previous = self.document.history.pop(name, None)
            if previous is None:
                raise NoHistoryError(name)
            self.document.versions[name] = previous
            self._save()
        log.debug("undo: entry=%s restored %s", name, previous)
        return previous

    def delete(self, name: str, retries: int = UPDATE_RETRIES) -> None:
        with self._locked(LockMode.EXCLUSIVE, retries):
            self.document = self._load()
            self.get(name)
            self.remove(name)
            self._save()
        log.debug("delete: entry=%s", name)

    def close(self) -> None:
        """Release the lock and remove the lock file. Safe to call twice.

        The lock file stays in place while another handle holds it.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self._lock.release()
        except OSError as exc:
            log.debug("close: release failed on %s: %s", self.lock_path, exc)
        try:
            if not self._lock.remove():
                log.debug("close: %s still held elsewhere, left in place", self.lock_path)
        except OSError as exc:
            log.debug("close: unable to remove %s: %s", self.lock_path, exc)

    def __enter__(self) -> EntryStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"EntryStore({str(self._path)!r}, {state})"

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @contextmanager
    def _locked(self, mode: LockMode, retries: int) -> Iterator[None]:
        """Hold the lock for the body, polling up to `retries` times to get it."""
        if self._closed:
            msg = f"store for {self._path} is closed"
            raise StoreClosedError(msg)
        for attempt in range(1, retries + 1):
            if self._lock.try_acquire(mode):
                break
            log.debug("%s lock busy on %s (attempt %d/%d)", mode.value, self.lock_path, attempt, retries)
            if attempt < retries:
                time.sleep(RETRY_INTERVAL)
        else:
            raise LockTimeoutError(self.lock_path, retries)
        try:
            yield
        finally:
            self._lock.release()

    def _load(self) -> Document:
        return decode(self._path.read_bytes(), self._format)

    def _save(self) -> None:
        """Encode first, then replace the file whole via a temp sibling."""
        data = encode(self.document, self._format)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            mode = stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            mode = 0o640
        try:
            tmp.write_bytes(data)
            os.chmod(tmp, mode)
            tmp.replace(self._path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        log.debug("wrote %d bytes to %s", len(data), self._path)
