"""Thread-safe pub/sub bus for the purecon runtime."""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from purecon.logging import get_logger

EventHandler = Callable[[Any], None]

RUNTIME_STARTED = "runtime.started"
RUNTIME_STOPPED = "runtime.stopped"
CONSOLE_COMMAND = "console.command"


class EventBus:
    """Minimal event bus supporting background threads.

    A failing handler is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._subscribers: defaultdict[str, list[EventHandler]] = defaultdict(list)
        self._lock = threading.RLock()
        self.logger = get_logger("events")

    def subscribe(self, topic: str, handler: EventHandler) -> None:
        with self._lock:
            if handler not in self._subscribers[topic]:
                self._subscribers[topic].append(handler)

    def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        with self._lock:
            if handler in self._subscribers[topic]:
                self._subscribers[topic].remove(handler)

    def emit(self, topic: str, payload: Any = None) -> None:
        with self._lock:
            handlers = list(self._subscribers.get(topic, ()))
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                self.logger.exception("Handler for {} failed", topic)
