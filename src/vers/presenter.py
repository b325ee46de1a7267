"""Render entries for display: plain string, shell export, JSON or YAML."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from vers.codec import Format, dump_mapping
from vers.errors import EntryNotFoundError, UnsupportedFormatError

if TYPE_CHECKING:
    from vers.models import Document, Version


class OutputFormat(Enum):
    STR = "str"
    SHELL = "shell"
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def parse(cls, value: OutputFormat | str) -> OutputFormat:
        if isinstance(value, OutputFormat):
            return value
        if value == "yml":
            return cls.YAML
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedFormatError(value, kind="output format") from None


OUTPUT_FORMATS = [f.value for f in OutputFormat] + ["yml"]


def shell_export(name: str, version: Version) -> str:
    var = name.upper().replace("-", "_")
    return f"export {var}_VERS={version}"


def _structured(entries: dict[str, Version], fmt: OutputFormat) -> str:
    data = {name: v.to_dict() for name, v in entries.items()}
    if fmt is OutputFormat.JSON:
        return dump_mapping(data, Format.JSON, indent=3)
    return dump_mapping(data, Format.YAML).rstrip("\n")


def render_entry(document: Document, name: str, fmt: OutputFormat | str) -> str:
    fmt = OutputFormat.parse(fmt)
    version = document.versions.get(name)
    if version is None:
        raise EntryNotFoundError(name)
    if fmt is OutputFormat.STR:
        return str(version)
    if fmt is OutputFormat.SHELL:
        return shell_export(name, version)
    return _structured({name: version}, fmt)


def render_all(document: Document, fmt: OutputFormat | str) -> str:
    """Render every current entry; str/shell give one line per entry."""
    fmt = OutputFormat.parse(fmt)
    if fmt in (OutputFormat.STR, OutputFormat.SHELL):
        return "\n".join(render_entry(document, name, fmt) for name in document.versions)
    return _structured(document.versions, fmt)
