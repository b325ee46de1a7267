"""Shared fixtures for vers tests."""

import pytest

from vers.models import Version
from vers.store import EntryStore


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run each test in its own directory with no stray config or VERS_* vars."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for var in ("VERS_FILE", "VERS_ENTRY", "VERS_DEBUG"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture
def app_version():
    return Version(prefix="v", major=1, minor=2, patch=3)


@pytest.fixture
def json_path(tmp_path):
    return tmp_path / "v.json"


@pytest.fixture
def seeded_store(json_path, app_version):
    """A v.json holding app = v1.2.3, already written to disk."""
    store = EntryStore.open(json_path, create=True)
    store.add("app", app_version)
    store.write(3)
    yield store
    store.close()
