"""Error types raised by the vers store, codec and presenter.

Everything the store can fail with is a VersError subclass, so callers can
catch one type; OS errors from the filesystem are left as they are.
"""

from __future__ import annotations

from pathlib import Path


class VersError(Exception):
    """Base class for vers errors."""


class UnsupportedFormatError(VersError):
    """File extension or output format is not one we handle."""

    def __init__(self, value: str, kind: str = "file type") -> None:
        super().__init__(f"unsupported {kind}: {value!r}")
        self.value = value


class ParseError(VersError):
    """Persisted content could not be decoded into a document."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class EntryNotFoundError(VersError):
    def __init__(self, name: str) -> None:
        super().__init__(f"{name}; does not exist")
        self.name = name


class NoHistoryError(VersError):
    def __init__(self, name: str) -> None:
        super().__init__(f"{name}; previous value does not exist")
        self.name = name


class InvalidArgumentError(VersError, ValueError):
    pass


class LockTimeoutError(VersError):
    """Retry budget ran out while the lock was held elsewhere."""

    def __init__(self, lock_path: Path, retries: int) -> None:
        super().__init__(f"unable to get lock on {lock_path} after {retries} attempt(s)")
        self.lock_path = lock_path
        self.retries = retries


class StoreClosedError(VersError):
    pass


class ConfigError(VersError):
    pass
