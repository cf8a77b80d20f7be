"""Direct access to the real terminal, bypassing stream redirection."""

from __future__ import annotations

import ctypes
import re
import sys
import threading
from typing import TextIO

from purecon.options import ConsoleFlags

STD_OUTPUT_HANDLE = -11
ENABLE_PROCESSED_OUTPUT = 0x0001
ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004

ANSI_ESCAPE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)|\x1b[@-Z\\-_]")


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE.sub("", text)


def enable_windows_ansi() -> bool:
    """Turn on virtual-terminal processing for the attached Windows console."""

    if sys.platform != "win32":
        return False
    kernel32 = ctypes.windll.kernel32
    handle = kernel32.GetStdHandle(STD_OUTPUT_HANDLE)
    mode = ctypes.c_uint32()
    if not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
        return False
    new_mode = mode.value | ENABLE_PROCESSED_OUTPUT | ENABLE_VIRTUAL_TERMINAL_PROCESSING
    return bool(kernel32.SetConsoleMode(handle, new_mode))


class TerminalChannel:
    """Output and input channel bound to the streams present at startup.

    Created before stdout/stderr are redirected, so writes here reach the
    terminal instead of looping back into the logging sink.
    """

    def __init__(
        self,
        flags: ConsoleFlags,
        *,
        stdout: TextIO | None = None,
        stdin: TextIO | None = None,
        prompt: str = "> ",
    ) -> None:
        self.flags = flags
        self.prompt = prompt
        self._out = stdout if stdout is not None else sys.stdout
        self._in = stdin if stdin is not None else sys.stdin
        self._lock = threading.RLock()
        self._prompt_shown = False
        self.ansi_enabled = False

    @classmethod
    def setup(cls, flags: ConsoleFlags, **kwargs) -> TerminalChannel:
        channel = cls(flags, **kwargs)
        if flags.setup_ansi and not flags.drop_ansi:
            channel.ansi_enabled = enable_windows_ansi()
        return channel

    @property
    def interactive(self) -> bool:
        return not self.flags.no_console

    @property
    def colorize(self) -> bool:
        return not self.flags.drop_ansi

    def write(self, text: str) -> None:
        if self.flags.drop_ansi:
            text = strip_ansi(text)
        with self._lock:
            self._out.write(text)
            self._out.flush()

    def write_line(self, text: str) -> None:
        self.write(text + "\n")

    def print_above(self, message: str) -> None:
        """Print *message* on its own line, keeping a visible prompt intact."""

        with self._lock:
            if self._prompt_shown:
                self.write("\r\x1b[2K" if self.colorize else "\r")
            self.write_line(message)
            if self._prompt_shown:
                self.write(self.prompt)

    def read_line(self) -> str | None:
        """Read one line without its newline; ``None`` once input has ended."""

        if self.interactive:
            with self._lock:
                self.write(self.prompt)
                self._prompt_shown = True
        line = self._in.readline()
        with self._lock:
            self._prompt_shown = False
        if not line:
            return None
        return line.rstrip("\r\n")
