"""Data models for the version file."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

# Top-level keys of the persisted document.
VERSIONS_KEY = "Version"
HISTORY_KEY = "Prev"


class BumpPart(StrEnum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


def _pick(d: dict[str, Any], key: str, default: Any) -> Any:
    """Look up a capitalized key, falling back to its lowercase spelling."""
    if key in d:
        return d[key]
    return d.get(key.lower(), default)


def _number(d: dict[str, Any], key: str) -> int:
    value = _pick(d, key, 0)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{key} must be an integer, got {value!r}"
        raise TypeError(msg)
    if value < 0:
        msg = f"{key} must not be negative, got {value}"
        raise ValueError(msg)
    return value


def _text(d: dict[str, Any], key: str) -> str:
    value = _pick(d, key, "")
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Version:
    """One entry's version: <prefix><major>.<minor>.<patch><suffix>."""

    prefix: str = ""
    suffix: str = ""
    tag: str = ""
    major: int = 0
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.prefix}{self.major}.{self.minor}.{self.patch}{self.suffix}"

    def bumped(self, part: BumpPart) -> Version:
        """Return the next version, zeroing lower-order numbers."""
        if part is BumpPart.MAJOR:
            return replace(self, major=self.major + 1, minor=0, patch=0)
        if part is BumpPart.MINOR:
            return replace(self, minor=self.minor + 1, patch=0)
        return replace(self, patch=self.patch + 1)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Version:
        if not isinstance(d, dict):
            msg = f"version entry must be a mapping, got {type(d).__name__}"
            raise TypeError(msg)
        return cls(
            prefix=_text(d, "Prefix"),
            suffix=_text(d, "Suffix"),
            tag=_text(d, "Tag"),
            major=_number(d, "Major"),
            minor=_number(d, "Minor"),
            patch=_number(d, "Patch"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "Prefix": self.prefix,
            "Suffix": self.suffix,
            "Tag": self.tag,
            "Major": self.major,
            "Minor": self.minor,
            "Patch": self.patch,
        }


def _entries(raw: Any, key: str) -> dict[str, Version]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        msg = f"{key} must be a mapping, got {type(raw).__name__}"
        raise TypeError(msg)
    return {str(name): Version.from_dict(v) for name, v in raw.items()}


@dataclass
class Document:
    """Current versions plus at most one previous version per entry."""

    versions: dict[str, Version] = field(default_factory=dict)
    history: dict[str, Version] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> Document:
        if d is None:
            return cls()
        if not isinstance(d, dict):
            msg = f"document root must be a mapping, got {type(d).__name__}"
            raise TypeError(msg)
        return cls(
            versions=_entries(_pick(d, VERSIONS_KEY, None), VERSIONS_KEY),
            history=_entries(_pick(d, HISTORY_KEY, None), HISTORY_KEY),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            VERSIONS_KEY: {name: v.to_dict() for name, v in self.versions.items()},
            HISTORY_KEY: {name: v.to_dict() for name, v in self.history.items()},
        }
