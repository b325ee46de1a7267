"""VersConfig: optional TOML config for the vers command.

Looked up as --config PATH, else the nearest .vers.toml walking upward from
the working directory, else ~/.vers.toml. Without a file, built-in defaults
apply.

.vers.toml example:

    [vers]
    version_file = "versions.json"   # relative to this file's directory
    entry = "app"
    format = "json"                  # default output format for `vers get`
    read_retries = 10
    write_retries = 3
    debug = false

    [defaults]                       # used by `init`/`set` when a flag is omitted
    prefix = "v"
    suffix = ""
    tag = ""
    major = 0
    minor = 0
    patch = 1
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from vers.errors import ConfigError

CONFIG_FILENAME = ".vers.toml"


@dataclass
class VersionDefaults:
    prefix: str = "v"
    suffix: str = ""
    tag: str = ""
    major: int = 0
    minor: int = 0
    patch: int = 1


@dataclass
class VersConfig:
    """Resolved settings for one vers invocation."""

    path: Path | None = None            # config file that was loaded, if any
    version_file: Path | None = None
    entry: str = ""
    format: str = "json"
    read_retries: int = 10
    write_retries: int = 3
    debug: bool = False
    defaults: VersionDefaults = field(default_factory=VersionDefaults)


def _get(section: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = section.get(key, default)
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        msg = f"{key} must be {kind.__name__}, got {value!r}"
        raise ConfigError(msg)
    return value


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        msg = f"[{name}] must be a table, got {section!r}"
        raise ConfigError(msg)
    return section


def find_config(start: Path | None = None, home: Path | None = None) -> Path | None:
    """Nearest .vers.toml from start upward, then the home directory."""
    start = start or Path.cwd()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    home_candidate = (home or Path.home()) / CONFIG_FILENAME
    if home_candidate.is_file():
        return home_candidate
    return None


def load_config(path: Path | str | None = None, *, start: Path | None = None) -> VersConfig:
    """Load an explicit config file, or discover one (see find_config)."""
    if path is not None:
        config_path: Path | None = Path(path)
        if not config_path.is_file():
            msg = f"config file not found: {config_path}"
            raise ConfigError(msg)
    else:
        config_path = find_config(start)
    if config_path is None:
        return VersConfig()

    try:
        with config_path.open("rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        msg = f"{config_path}: {exc}"
        raise ConfigError(msg) from exc

    vers_section = _section(raw, "vers")
    def_section = _section(raw, "defaults")

    version_file = None
    vf = _get(vers_section, "version_file", str, "")
    if vf:
        version_file = Path(vf).expanduser()
        if not version_file.is_absolute():
            version_file = config_path.parent / version_file

    return VersConfig(
        path=config_path,
        version_file=version_file,
        entry=_get(vers_section, "entry", str, ""),
        format=_get(vers_section, "format", str, "json"),
        read_retries=_get(vers_section, "read_retries", int, 10),
        write_retries=_get(vers_section, "write_retries", int, 3),
        debug=_get(vers_section, "debug", bool, False),
        defaults=VersionDefaults(
            prefix=_get(def_section, "prefix", str, "v"),
            suffix=_get(def_section, "suffix", str, ""),
            tag=_get(def_section, "tag", str, ""),
            major=_get(def_section, "major", int, 0),
            minor=_get(def_section, "minor", int, 0),
            patch=_get(def_section, "patch", int, 1),
        ),
    )
