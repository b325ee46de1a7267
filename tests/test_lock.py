"""FileLock reader/writer semantics (separate descriptors conflict under flock)."""

import os

import pytest

import vers.lock as lock_module
from vers.lock import FileLock, LockMode, lock_path_for


@pytest.fixture
def lock_file(tmp_path):
    return tmp_path / "v.json.lck"


@pytest.fixture
def locks(lock_file):
    held = []

    def make():
        lock = FileLock(lock_file)
        held.append(lock)
        return lock

    yield make
    for lock in held:
        lock.release()


def test_lock_path_for_appends_suffix(tmp_path):
    assert lock_path_for(tmp_path / "v.yaml") == tmp_path / "v.yaml.lck"


def test_exclusive_acquire_creates_lock_file(locks, lock_file):
    lock = locks()
    assert lock.try_acquire_exclusive()
    assert lock.locked
    assert lock.mode is LockMode.EXCLUSIVE
    assert lock_file.exists()


def test_shared_locks_coexist(locks):
    a, b = locks(), locks()
    assert a.try_acquire_shared()
    assert b.try_acquire_shared()


def test_exclusive_excludes_shared_and_exclusive(locks):
    writer, reader, other = locks(), locks(), locks()
    assert writer.try_acquire_exclusive()
    assert not reader.try_acquire_shared()
    assert not other.try_acquire_exclusive()
    assert not reader.locked


def test_shared_excludes_exclusive(locks):
    reader, writer = locks(), locks()
    assert reader.try_acquire_shared()
    assert not writer.try_acquire_exclusive()


def test_release_lets_next_holder_in(locks):
    first, second = locks(), locks()
    assert first.try_acquire_exclusive()
    assert not second.try_acquire_exclusive()
    first.release()
    assert not first.locked
    assert second.try_acquire_exclusive()


def test_release_without_lock_is_noop(locks):
    lock = locks()
    lock.release()
    lock.release()
    assert not lock.locked


def test_remove_ignores_missing_file(locks, lock_file):
    lock = locks()
    lock.remove()
    assert lock.try_acquire_shared()
    lock.release()
    lock.remove()
    assert not lock_file.exists()


def test_try_acquire_by_mode(locks):
    lock = locks()
    assert lock.try_acquire(LockMode.SHARED)
    assert lock.mode is LockMode.SHARED


def test_remove_leaves_file_held_by_another_handle(locks, lock_file):
    holder, other = locks(), locks()
    assert holder.try_acquire_exclusive()
    assert not other.remove()
    assert lock_file.exists()
    assert not other.locked
    holder.release()
    assert other.remove()
    assert not lock_file.exists()


def test_lock_on_unlinked_file_is_dropped(locks, lock_file, monkeypatch):
    real_open = os.open
    opened = []

    def open_then_unlink(path, flags, mode=0o777):
        fd = real_open(path, flags, mode)
        if not opened:
            os.unlink(path)
        opened.append(path)
        return fd

    monkeypatch.setattr(lock_module.os, "open", open_then_unlink)
    lock = locks()
    assert not lock.try_acquire_exclusive()
    assert not lock.locked
    # a fresh open lands on the file now on disk
    assert lock.try_acquire_exclusive()
    assert lock_file.exists()
