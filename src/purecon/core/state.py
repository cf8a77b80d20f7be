"""Runtime state containers."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum


class Phase(str, Enum):
    CREATED = "created"
    PARSED = "parsed"
    RUNTIME_STARTED = "runtime-started"
    REDIRECTED = "redirected"
    INPUT_STARTED = "input-started"
    AWAITING = "awaiting"
    STOPPED = "stopped"


@dataclass(slots=True)
class RuntimeState:
    phase: Phase = Phase.CREATED
    history: list[Phase] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def advance(self, phase: Phase) -> None:
        with self._lock:
            self.phase = phase
            self.history.append(phase)
