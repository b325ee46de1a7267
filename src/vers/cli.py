"""vers CLI: keep semantic versions for named entries in a JSON or YAML file.

Commands:
    vers init                  create a version file with one entry
    vers set                   add or update an entry
    vers get [-o FMT]          print one entry (-e) or all of them
    vers bump -i PART          increment major, minor or patch
    vers undo                  restore the value before the last set/bump
    vers delete                remove an entry

Global options pick the file and entry:
    vers -f versions.json -e app bump -i minor
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from vers.config import VersConfig, load_config
from vers.errors import VersError
from vers.models import BumpPart, Version
from vers.presenter import OUTPUT_FORMATS, OutputFormat, render_all, render_entry
from vers.store import EntryStore

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import NoReturn

log = logging.getLogger("vers.cli")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _EchoHandler(logging.Handler):
    """Send log records to the current stderr via click."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def _setup_logging(debug: bool) -> None:
    logger = logging.getLogger("vers")
    if not any(isinstance(h, _EchoHandler) for h in logger.handlers):
        handler = _EchoHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)


def _load_cfg(config_path: Path | None) -> VersConfig:
    try:
        return load_config(config_path)
    except VersError as exc:
        raise click.ClickException(f"Config file was found but an error occurred; {exc}") from exc


def _require_file(cfg: VersConfig) -> Path:
    if cfg.version_file is None:
        raise click.ClickException(
            "you must supply the .json or .yaml version file pathname (--version-file)"
        )
    return cfg.version_file


def _require_entry(cfg: VersConfig) -> str:
    if not cfg.entry:
        raise click.ClickException("you must supply the entry name (--entry)")
    return cfg.entry


def _open_store(path: Path, *, create: bool = False) -> EntryStore:
    try:
        return EntryStore.open(path, create=create)
    except (OSError, VersError) as exc:
        raise click.ClickException(f"Open failed on {path}; {exc}") from exc


def _soft_fail(action: str, path: Path, exc: Exception) -> NoReturn:
    """Log a failed update and exit non-zero without a traceback."""
    log.error("%s failed on %s; %s", action, path, exc)
    raise SystemExit(1) from exc


_VERSION_OPTIONS = [
    click.option("--major", "-M", type=click.IntRange(min=0), default=None, help="Major number (default: 0)"),
    click.option("--minor", "-m", type=click.IntRange(min=0), default=None, help="Minor number (default: 0)"),
    click.option("--patch", "-p", type=click.IntRange(min=0), default=None, help="Patch number (default: 1)"),
    click.option("--prefix", default=None, help='Prefix (default: "v")'),
    click.option("--suffix", default=None, help="Suffix"),
    click.option("--tag", default=None, help="Free-form tag stored with the entry"),
]


def _version_options(f: Callable[..., Any]) -> Callable[..., Any]:
    for option in reversed(_VERSION_OPTIONS):
        f = option(f)
    return f


def _build_version(cfg: VersConfig, fields: dict[str, Any]) -> Version:
    """Flag values where given, config defaults otherwise."""
    d = cfg.defaults

    def pick(key: str, default: Any) -> Any:
        value = fields.get(key)
        return default if value is None else value

    return Version(
        prefix=pick("prefix", d.prefix),
        suffix=pick("suffix", d.suffix),
        tag=pick("tag", d.tag),
        major=pick("major", d.major),
        minor=pick("minor", d.minor),
        patch=pick("patch", d.patch),
    )


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="vers")
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: nearest .vers.toml, then ~/.vers.toml)",
)
@click.option("--debug", "-d", is_flag=True, envvar="VERS_DEBUG", help="Turn on debug messages")
@click.option(
    "--version-file", "-f", default=None, envvar="VERS_FILE",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Version file to use (.json, .yaml or .yml)",
)
@click.option("--entry", "-e", default=None, envvar="VERS_ENTRY", help="Which entry in the version file")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    debug: bool,
    version_file: Path | None,
    entry: str | None,
) -> None:
    """vers: a simple way to manage versions."""
    cfg = _load_cfg(config_path)
    if version_file is not None:
        cfg.version_file = version_file
    if entry:
        cfg.entry = entry
    cfg.debug = debug or cfg.debug
    _setup_logging(cfg.debug)
    log.debug("config: %r", cfg)
    ctx.obj = cfg


# ---------------------------------------------------------------------------
# vers init / vers set
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite the file if it already exists")
@_version_options
@click.pass_obj
def init(cfg: VersConfig, force: bool, **fields: Any) -> None:
    """Make a new version file.

    The entry name defaults to the file name without its extension.
    """
    path = _require_file(cfg)
    entry = cfg.entry or path.stem
    if path.exists() and not force:
        raise click.ClickException("File exists already and --force not set")

    version = _build_version(cfg, fields)
    with _open_store(path, create=True) as store:
        store.add(entry, version)
        try:
            store.write(cfg.write_retries)
        except (OSError, VersError) as exc:
            _soft_fail("Write", path, exc)
    click.echo(f"Created {store.path} ({entry} {version})")


@cli.command("set")
@_version_options
@click.pass_obj
def set_(cfg: VersConfig, **fields: Any) -> None:
    """Add an entry to the version file, or update an existing one.

    The replaced value is kept so `vers undo` can restore it.
    """
    path = _require_file(cfg)
    entry = _require_entry(cfg)
    version = _build_version(cfg, fields)
    with _open_store(path) as store:
        try:
            store.set(entry, version, cfg.read_retries)
        except (OSError, VersError) as exc:
            _soft_fail("Set", path, exc)
    click.echo(str(version))


# ---------------------------------------------------------------------------
# vers get
# ---------------------------------------------------------------------------


@cli.command()
@click.option(
    "--fmt", "-o", default=None, type=click.Choice(OUTPUT_FORMATS),
    help="Output format (default: json)",
)
@click.pass_obj
def get(cfg: VersConfig, fmt: str | None) -> None:
    """Print the version of one entry (--entry) or of all entries."""
    path = _require_file(cfg)
    try:
        out_fmt = OutputFormat.parse(fmt or cfg.format)
    except VersError as exc:
        raise click.ClickException(str(exc)) from exc

    with _open_store(path) as store:
        try:
            store.read(cfg.read_retries)
        except (OSError, VersError) as exc:
            raise click.ClickException(f"Read failed on {path}; {exc}") from exc
        try:
            if cfg.entry:
                text = render_entry(store.document, cfg.entry, out_fmt)
            else:
                text = render_all(store.document, out_fmt)
        except VersError as exc:
            raise click.ClickException(f"Failed: {exc}") from exc
    if text:
        click.echo(text)


# ---------------------------------------------------------------------------
# vers bump / vers undo / vers delete
# ---------------------------------------------------------------------------


@cli.command()
@click.option(
    "--bump", "-i", "part", required=True,
    type=click.Choice([p.value for p in BumpPart]),
    help="Which number to increment",
)
@click.pass_obj
def bump(cfg: VersConfig, part: str) -> None:
    """Increment the major, minor or patch number of an entry."""
    path = _require_file(cfg)
    entry = _require_entry(cfg)
    with _open_store(path) as store:
        try:
            version = store.bump(entry, part)
        except (OSError, VersError) as exc:
            _soft_fail("Bump", path, exc)
    click.echo(str(version))


@cli.command()
@click.pass_obj
def undo(cfg: VersConfig) -> None:
    """Undo the last set or bump for an entry (one step only)."""
    path = _require_file(cfg)
    entry = _require_entry(cfg)
    with _open_store(path) as store:
        try:
            version = store.undo(entry)
        except (OSError, VersError) as exc:
            _soft_fail("Undo", path, exc)
    click.echo(str(version))


@cli.command()
@click.pass_obj
def delete(cfg: VersConfig) -> None:
    """Delete an entry from the version file."""
    path = _require_file(cfg)
    entry = _require_entry(cfg)
    with _open_store(path) as store:
        try:
            store.delete(entry)
        except (OSError, VersError) as exc:
            _soft_fail("Delete", path, exc)
    click.echo(f"Deleted {entry}")
