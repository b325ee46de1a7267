"""Semantic version records for named entries, kept in a JSON or YAML file.

Layout of a version file (JSON shown; YAML uses the same keys):

    {
      "Version": {"app": {"Prefix": "v", "Suffix": "", "Tag": "",
                          "Major": 1, "Minor": 3, "Patch": 0}},
      "Prev":    {"app": {"Prefix": "v", "Suffix": "", "Tag": "",
                          "Major": 1, "Minor": 2, "Patch": 3}}
    }

"Prev" keeps one earlier value per entry, which `undo` restores.

Concurrent access: readers take flock(LOCK_SH) and writers flock(LOCK_EX) on
"<file>.lck", polling with a bounded retry budget. Writes replace the file
whole (temp file + rename).
"""

from vers.codec import Format, decode, encode
from vers.errors import (
    EntryNotFoundError,
    InvalidArgumentError,
    LockTimeoutError,
    NoHistoryError,
    ParseError,
    StoreClosedError,
    UnsupportedFormatError,
    VersError,
)
from vers.lock import FileLock, LockMode
from vers.models import BumpPart, Document, Version
from vers.presenter import OutputFormat, render_all, render_entry
from vers.store import EntryStore

__all__ = [
    "BumpPart",
    "Document",
    "EntryNotFoundError",
    "EntryStore",
    "FileLock",
    "Format",
    "InvalidArgumentError",
    "LockMode",
    "LockTimeoutError",
    "NoHistoryError",
    "OutputFormat",
    "ParseError",
    "StoreClosedError",
    "UnsupportedFormatError",
    "Version",
    "VersError",
    "decode",
    "encode",
    "render_all",
    "render_entry",
]
