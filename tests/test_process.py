import os

import pytest

from purecon.utils.process import SingleInstance, read_lock_owner


def test_second_instance_is_refused(tmp_path):
    lockfile = tmp_path / "run" / "purecon.lock"
    with SingleInstance(lockfile) as first:
        assert first.held
        second = SingleInstance(lockfile)
        assert second.acquire() is False
        with pytest.raises(RuntimeError):
            with SingleInstance(lockfile):
                pass
    assert not first.held


def test_lock_can_be_reacquired_after_release(tmp_path):
    lockfile = tmp_path / "purecon.lock"
    instance = SingleInstance(lockfile)
    assert instance.acquire()
    instance.release()
    assert instance.acquire()
    instance.release()


def test_lock_owner_is_recorded_while_held(tmp_path):
    lockfile = tmp_path / "purecon.lock"
    assert read_lock_owner(lockfile) is None
    with SingleInstance(lockfile):
        assert read_lock_owner(lockfile) == os.getpid()
    assert read_lock_owner(lockfile) is None
