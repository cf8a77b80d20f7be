"""Default console runtime and its completion signal."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Protocol

from purecon.config import AppSettings
from purecon.console.terminal import TerminalChannel
from purecon.core.events import CONSOLE_COMMAND, RUNTIME_STARTED, RUNTIME_STOPPED, EventBus
from purecon.logging import get_logger
from purecon.options import ConsoleFlags


class Outcome(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CompletionSignal:
    """Resolves exactly once, either completed or cancelled."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._outcome: Outcome | None = None

    @property
    def done(self) -> bool:
        return self._event.is_set()

    @property
    def outcome(self) -> Outcome | None:
        return self._outcome

    def complete(self) -> bool:
        return self._resolve(Outcome.COMPLETED)

    def cancel(self) -> bool:
        return self._resolve(Outcome.CANCELLED)

    def _resolve(self, outcome: Outcome) -> bool:
        with self._lock:
            if self._outcome is not None:
                return False
            self._outcome = outcome
        self._event.set()
        return True

    def wait(self, timeout: float | None = None) -> Outcome | None:
        """Block until resolved; ``None`` if *timeout* elapsed first."""
        if not self._event.wait(timeout):
            return None
        return self._outcome


class Runtime(Protocol):
    """What the loader needs from an application runtime."""

    completion: CompletionSignal

    @property
    def is_active(self) -> bool: ...

    def start(self) -> None: ...

    def cancel(self) -> None: ...

    def logger(self, name: str): ...

    def dispatch_command(self, line: str) -> None: ...


class ConsoleCommandSender:
    """Shows messages addressed to the console user."""

    def __init__(self, terminal: TerminalChannel) -> None:
        self.terminal = terminal
        self.logger = get_logger("console-sender")

    def send_message(self, message: object) -> None:
        try:
            self.terminal.print_above(str(message))
        except Exception:
            self.logger.exception("Exception while sending console message")


class ConsoleRuntime:
    """Runtime shipped with purecon.

    Console commands are published on the event bus for whoever subscribes;
    the runtime itself only understands the stop command.
    """

    def __init__(
        self,
        flags: ConsoleFlags,
        settings: AppSettings,
        terminal: TerminalChannel,
        events: EventBus | None = None,
    ) -> None:
        self.flags = flags
        self.settings = settings
        self.terminal = terminal
        self.events = events or EventBus()
        self.completion = CompletionSignal()
        self.command_sender = ConsoleCommandSender(terminal)
        self._logger = get_logger("runtime")
        self._started = False

    @property
    def is_active(self) -> bool:
        return self._started and not self.completion.done

    def logger(self, name: str):
        return get_logger(name)

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self.events.subscribe(CONSOLE_COMMAND, self._handle_command)
        self._logger.info(
            "{} runtime started ({} mode)",
            self.settings.app_name,
            "headless" if self.flags.no_console else "interactive",
        )
        self.events.emit(RUNTIME_STARTED, self)

    def dispatch_command(self, line: str) -> None:
        self.events.emit(CONSOLE_COMMAND, line)

    def shutdown(self) -> None:
        if self.completion.complete():
            self._logger.info("Runtime stopped")
            self.events.emit(RUNTIME_STOPPED, Outcome.COMPLETED)

    def cancel(self) -> None:
        if self.completion.cancel():
            self._logger.info("Runtime cancelled")
            self.events.emit(RUNTIME_STOPPED, Outcome.CANCELLED)

    def _handle_command(self, line: str) -> None:
        if line == self.settings.console.stop_command:
            self.shutdown()
            return
        self._logger.debug("Console command published: {}", line)


def build_runtime(flags: ConsoleFlags, settings: AppSettings, terminal: TerminalChannel) -> ConsoleRuntime:
    return ConsoleRuntime(flags, settings, terminal)
