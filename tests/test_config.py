"""Config discovery and parsing."""

from pathlib import Path

import pytest

from vers.config import CONFIG_FILENAME, VersConfig, find_config, load_config
from vers.errors import ConfigError


def write_config(directory: Path, text: str) -> Path:
    path = directory / CONFIG_FILENAME
    path.write_text(text)
    return path


def test_no_config_gives_defaults(tmp_path):
    cfg = load_config()
    assert cfg == VersConfig()
    assert cfg.defaults.prefix == "v"
    assert cfg.defaults.patch == 1
    assert cfg.read_retries == 10
    assert cfg.write_retries == 3


def test_find_config_walks_upward(tmp_path):
    path = write_config(tmp_path, "")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_config(nested) == path


def test_find_config_falls_back_to_home(tmp_path):
    home = tmp_path / "home"
    path = write_config(home, "")
    elsewhere = tmp_path / "work"
    elsewhere.mkdir()
    assert find_config(elsewhere, home=home) == path


def test_load_full_config(tmp_path):
    write_config(tmp_path, """\
[vers]
version_file = "build/versions.yaml"
entry = "svc"
format = "shell"
read_retries = 4
write_retries = 2
debug = true

[defaults]
prefix = "r"
suffix = "-dev"
tag = "edge"
major = 3
minor = 1
patch = 0
""")
    cfg = load_config()
    assert cfg.path.resolve() == (tmp_path / CONFIG_FILENAME).resolve()
    assert cfg.version_file.resolve() == (tmp_path / "build" / "versions.yaml").resolve()
    assert cfg.entry == "svc"
    assert cfg.format == "shell"
    assert (cfg.read_retries, cfg.write_retries, cfg.debug) == (4, 2, True)
    assert cfg.defaults.prefix == "r"
    assert cfg.defaults.suffix == "-dev"
    assert cfg.defaults.tag == "edge"
    assert (cfg.defaults.major, cfg.defaults.minor, cfg.defaults.patch) == (3, 1, 0)


def test_version_file_relative_to_config_dir(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    path = write_config(project, '[vers]\nversion_file = "v.json"\n')
    cfg = load_config(path)
    assert cfg.version_file == project / "v.json"


def test_absolute_version_file_kept(tmp_path):
    target = tmp_path / "elsewhere" / "v.json"
    write_config(tmp_path, f'[vers]\nversion_file = "{target}"\n')
    assert load_config().version_file == target


def test_explicit_missing_config(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.toml")


def test_malformed_toml(tmp_path):
    write_config(tmp_path, "[vers\nentry = ")
    with pytest.raises(ConfigError):
        load_config()


@pytest.mark.parametrize("text", [
    "[vers]\nread_retries = \"ten\"\n",
    "[vers]\nread_retries = true\n",
    "[defaults]\nprefix = 1\n",
    "vers = \"oops\"\n",
    "defaults = 3\n",
])
def test_wrong_types(tmp_path, text):
    write_config(tmp_path, text)
    with pytest.raises(ConfigError):
        load_config()
