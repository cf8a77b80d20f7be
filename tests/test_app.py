import io
import threading

from loguru import logger

from purecon.config import AppSettings
from purecon.console.terminal import TerminalChannel
from purecon.core.app import CompletionSignal, ConsoleCommandSender, Outcome, build_runtime
from purecon.core.events import CONSOLE_COMMAND, RUNTIME_STOPPED
from purecon.options import ConsoleFlags


def _runtime():
    flags = ConsoleFlags(no_console=True)
    terminal = TerminalChannel(flags, stdout=io.StringIO(), stdin=io.StringIO())
    return build_runtime(flags, AppSettings(), terminal)


def test_completion_resolves_once():
    signal = CompletionSignal()
    assert signal.wait(timeout=0.01) is None
    assert signal.cancel() is True
    assert signal.complete() is False
    assert signal.wait() is Outcome.CANCELLED
    assert signal.done


def test_completion_wakes_waiting_thread():
    signal = CompletionSignal()
    results = []
    waiter = threading.Thread(target=lambda: results.append(signal.wait(timeout=5)))
    waiter.start()
    signal.complete()
    waiter.join(timeout=5)
    assert results == [Outcome.COMPLETED]


def test_runtime_publishes_commands_and_stops():
    runtime = _runtime()
    published = []
    stopped = []
    runtime.events.subscribe(CONSOLE_COMMAND, published.append)
    runtime.events.subscribe(RUNTIME_STOPPED, stopped.append)
    assert not runtime.is_active

    runtime.start()
    assert runtime.is_active
    runtime.dispatch_command("plugins")
    runtime.dispatch_command("stop")

    assert published == ["plugins", "stop"]
    assert runtime.completion.outcome is Outcome.COMPLETED
    assert stopped == [Outcome.COMPLETED]
    assert not runtime.is_active


def test_runtime_cancel_is_reported_once():
    runtime = _runtime()
    stopped = []
    runtime.events.subscribe(RUNTIME_STOPPED, stopped.append)
    runtime.start()
    runtime.cancel()
    runtime.shutdown()
    assert stopped == [Outcome.CANCELLED]


def test_command_sender_prints_above_prompt():
    out = io.StringIO()
    sender = ConsoleCommandSender(TerminalChannel(ConsoleFlags(), stdout=out, stdin=io.StringIO()))
    sender.send_message(123)
    assert out.getvalue() == "123\n"


def test_command_sender_failure_is_logged():
    class BrokenTerminal:
        def print_above(self, message):
            raise OSError("terminal gone")

    messages = []
    handler_id = logger.add(messages.append, level="ERROR", format="{message}")
    try:
        ConsoleCommandSender(BrokenTerminal()).send_message("hello")
    finally:
        logger.remove(handler_id)
    assert any("Exception while sending console message" in message for message in messages)
