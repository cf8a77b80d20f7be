"""Console input handling: reads commands and hands them to the runtime."""

from __future__ import annotations

import threading
from typing import Protocol

from purecon.console.terminal import TerminalChannel
from purecon.exceptions import ConsoleInputError
from purecon.logging import get_logger
from purecon.options import ConsoleFlags


class CommandTarget(Protocol):
    @property
    def is_active(self) -> bool: ...

    def dispatch_command(self, line: str) -> None: ...


class ConsoleReader:
    """Reads user input from the terminal channel.

    In headless mode (``--no-console``) reading past the end of input raises
    :class:`ConsoleInputError`, or returns an empty string when
    ``--safe-reading`` is set.
    """

    def __init__(self, flags: ConsoleFlags, terminal: TerminalChannel) -> None:
        self.flags = flags
        self.terminal = terminal
        self.exhausted = False

    def read_line(self) -> str:
        line = self.terminal.read_line()
        if line is not None:
            return line
        self.exhausted = True
        if self.flags.no_console and not self.flags.safe_reading:
            raise ConsoleInputError("console input has ended")
        return ""


class InputThread:
    """Background thread feeding console lines to the runtime."""

    def __init__(self, flags: ConsoleFlags, runtime: CommandTarget, terminal: TerminalChannel) -> None:
        self.flags = flags
        self.runtime = runtime
        self.reader = ConsoleReader(flags, terminal)
        self.logger = get_logger("console")
        self._thread: threading.Thread | None = None

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_alive:
            return
        name = "purecon-headless-reader" if self.flags.no_console else "purecon-console"
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self) -> None:
        try:
            self._loop()
        except ConsoleInputError as exc:
            self.logger.error("Console input stopped: {}", exc)
        except Exception:
            self.logger.exception("Console input thread crashed")

    def _loop(self) -> None:
        while self.runtime.is_active:
            line = self.reader.read_line()
            if self.reader.exhausted:
                self.logger.debug("Console input ended")
                return
            if not line.strip():
                continue
            self.runtime.dispatch_command(line.strip())
