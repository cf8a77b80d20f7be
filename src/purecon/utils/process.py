"""Process-wide helpers."""

from __future__ import annotations

import os
from pathlib import Path

import portalocker

from purecon.logging import get_logger


class SingleInstance:
    """Ensures only one purecon loader runs against a home directory.

    The holder's PID is written into the lock file so ``doctor`` can say who
    owns it.
    """

    def __init__(self, lockfile: Path) -> None:
        self.lockfile = lockfile
        self._lock: portalocker.Lock | None = None
        self.logger = get_logger("process")

    @property
    def held(self) -> bool:
        return self._lock is not None

    def acquire(self) -> bool:
        self.lockfile.parent.mkdir(parents=True, exist_ok=True)
        lock = portalocker.Lock(str(self.lockfile), timeout=0)
        try:
            handle = lock.acquire()
        except portalocker.exceptions.LockException:
            owner = read_lock_owner(self.lockfile)
            self.logger.warning("Lock {} is held by process {}", self.lockfile, owner or "<unknown>")
            return False
        handle.seek(0)
        handle.truncate()
        handle.write(f"{os.getpid()}\n")
        handle.flush()
        self._lock = lock
        return True

    def release(self) -> None:
        if self._lock:
            self._lock.release()
            self._lock = None

    def __enter__(self) -> SingleInstance:
        if not self.acquire():
            raise RuntimeError(f"another purecon instance is already running ({self.lockfile})")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.release()


def read_lock_owner(lockfile: Path) -> int | None:
    """PID recorded by the current holder of *lockfile*, ``None`` if it is free."""

    if not lockfile.exists():
        return None
    probe = portalocker.Lock(str(lockfile), timeout=0)
    try:
        probe.acquire()
    except portalocker.exceptions.LockException:
        pass
    else:
        probe.release()
        return None
    try:
        text = lockfile.read_text().strip()
    except OSError:
        return None
    return int(text) if text.isdigit() else None
