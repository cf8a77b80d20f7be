"""Line-buffered replacements for the process's standard streams.

Everything written to a redirected stream is cut into complete lines and
handed to a sink callback, one call per line, newline stripped. Text after the
last newline stays pending until a later write completes it; ``flush()`` never
emits a partial line. A line that never receives its newline keeps growing,
there is no backpressure.
"""

from __future__ import annotations

import codecs
import io
import sys
import threading
import traceback
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

LineSink = Callable[[str], None]
ErrorReporter = Callable[[BaseException, str], None]


def report_to_original_stderr(exc: BaseException, line: str) -> None:
    """Write a sink failure to the interpreter's original stderr."""

    stream = sys.__stderr__
    if stream is None or stream.closed:
        return
    stream.write(f"purecon: line sink failed for {line!r}\n")
    traceback.print_exception(type(exc), exc, exc.__traceback__, file=stream)
    stream.flush()


class _BinaryWriter:
    """``sys.stdout.buffer`` stand-in feeding bytes into the owning stream."""

    def __init__(self, owner: LineBufferedStream) -> None:
        self._owner = owner

    def write(self, data: bytes) -> int:
        self._owner.write(data)
        return len(data)

    def flush(self) -> None:
        self._owner.flush()

    def writable(self) -> bool:
        return True


class LineBufferedStream(io.TextIOBase):
    """Text stream that forwards each completed line to *sink*.

    Each ``write`` call appends and emits while holding the stream's lock, so
    every emitted line is assembled from whole write calls. A sink that writes
    back into the same stream on the same thread only queues its lines; they
    are emitted by the next outer ``write``.
    """

    def __init__(
        self,
        sink: LineSink,
        *,
        name: str = "<redirected>",
        on_error: ErrorReporter | None = None,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__()
        self._sink = sink
        self._name = name
        self._on_error = on_error or report_to_original_stderr
        self._encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending: list[str] = []
        self._ready: deque[str] = deque()
        self._lock = threading.RLock()
        self._local = threading.local()
        self.buffer = _BinaryWriter(self)

    @property
    def name(self) -> str:
        return self._name

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def errors(self) -> str:
        return "replace"

    @property
    def pending(self) -> str:
        """Text of the current incomplete line."""
        with self._lock:
            return "".join(self._pending)

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return False

    def flush(self) -> None:
        # Partial lines stay buffered until their newline arrives.
        return None

    def write(self, data: str | bytes) -> int:
        if isinstance(data, (bytes, bytearray, memoryview)):
            size = len(data)
            with self._lock:
                text = self._decoder.decode(bytes(data))
                self._accept(text)
            return size
        if not isinstance(data, str):
            raise TypeError(f"write() argument must be str or bytes, not {type(data).__name__}")
        with self._lock:
            self._accept(data)
        return len(data)

    def _accept(self, text: str) -> None:
        if text:
            self._split(text)
        if getattr(self._local, "emitting", False):
            return
        self._local.emitting = True
        try:
            for _ in range(len(self._ready)):
                self._emit(self._ready.popleft())
        finally:
            self._local.emitting = False

    def _split(self, text: str) -> None:
        if "\n" not in text:
            self._pending.append(text)
            return
        self._pending.append(text)
        *lines, rest = "".join(self._pending).split("\n")
        self._pending = [rest] if rest else []
        for line in lines:
            self._ready.append(line[:-1] if line.endswith("\r") else line)

    def _emit(self, line: str) -> None:
        try:
            self._sink(line)
        except Exception as exc:  # noqa: BLE001
            try:
                self._on_error(exc, line)
            except Exception:  # noqa: BLE001
                # A broken reporter must not turn a write into an error.
                return


@dataclass(slots=True)
class RedirectionHandle:
    """Result of :func:`install`; ``restore()`` puts the previous streams back."""

    namespace: Any
    stdout: LineBufferedStream
    stderr: LineBufferedStream
    previous_stdout: Any
    previous_stderr: Any
    restored: bool = False

    def restore(self) -> None:
        if self.restored:
            return
        if self.namespace.stdout is self.stdout:
            self.namespace.stdout = self.previous_stdout
        if self.namespace.stderr is self.stderr:
            self.namespace.stderr = self.previous_stderr
        self.restored = True


def install(
    sink_out: LineSink,
    sink_err: LineSink,
    *,
    namespace: Any = sys,
    on_error: ErrorReporter | None = None,
) -> RedirectionHandle:
    """Replace ``namespace.stdout``/``namespace.stderr`` with line-buffered streams."""

    stdout = LineBufferedStream(sink_out, name="<stdout>", on_error=on_error)
    stderr = LineBufferedStream(sink_err, name="<stderr>", on_error=on_error)
    handle = RedirectionHandle(
        namespace=namespace,
        stdout=stdout,
        stderr=stderr,
        previous_stdout=namespace.stdout,
        previous_stderr=namespace.stderr,
    )
    namespace.stdout = stdout
    namespace.stderr = stderr
    return handle
