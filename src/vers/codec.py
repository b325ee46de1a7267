"""Encode/decode the version document as JSON or YAML.

The format is picked from the file extension:

    .json          -> Format.JSON
    .yaml / .yml   -> Format.YAML

Persisted shape (same keys in both formats):

    {"Version": {"<name>": {"Prefix": "v", "Suffix": "", "Tag": "",
                            "Major": 1, "Minor": 2, "Patch": 3}},
     "Prev":    {"<name>": {...}}}
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from vers.errors import ParseError, UnsupportedFormatError
from vers.models import Document


class Format(Enum):
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def from_extension(cls, ext: str) -> Format:
        """Map a suffix such as '.yml' (leading dot optional) to a Format."""
        key = ext.lower().lstrip(".")
        try:
            return _EXTENSIONS[key]
        except KeyError:
            raise UnsupportedFormatError(ext or "<none>") from None

    @classmethod
    def from_path(cls, path: Path | str) -> Format:
        return cls.from_extension(Path(path).suffix)


_EXTENSIONS = {
    "json": Format.JSON,
    "yaml": Format.YAML,
    "yml": Format.YAML,
}


def _coerce(fmt: Format | str) -> Format:
    return fmt if isinstance(fmt, Format) else Format.from_extension(fmt)


def dump_mapping(data: dict[str, Any], fmt: Format, *, indent: int = 2) -> str:
    """Serialize a plain mapping as text in the given format."""
    if fmt is Format.JSON:
        return json.dumps(data, indent=indent)
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def encode(document: Document, fmt: Format | str) -> bytes:
    fmt = _coerce(fmt)
    text = dump_mapping(document.to_dict(), fmt)
    if not text.endswith("\n"):
        text += "\n"
    return text.encode("utf-8")


def decode(data: bytes, fmt: Format | str) -> Document:
    """Parse file content into a Document. Empty content is an empty Document."""
    fmt = _coerce(fmt)
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"version file is not valid UTF-8: {exc}", exc) from exc
    if not text.strip():
        return Document()

    try:
        if fmt is Format.JSON:
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ParseError(f"malformed {fmt.value} content: {exc}", exc) from exc

    try:
        return Document.from_dict(raw)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"unexpected {fmt.value} document shape: {exc}", exc) from exc
