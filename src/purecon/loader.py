"""purecon console entrypoint.

Startup order: parse flags, open the terminal channel, configure logging,
start the runtime, redirect stdout/stderr into the runtime's loggers, start
console input, then block until the runtime completes or is cancelled.
Calling :func:`run` twice in one process is not supported.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, TextIO

import typer

from purecon.config import AppSettings, load_settings
from purecon.console.reader import InputThread
from purecon.console.terminal import TerminalChannel
from purecon.core.app import Outcome, Runtime, build_runtime
from purecon.core.state import Phase, RuntimeState
from purecon.logging import configure_logging, get_logger, log_sink_failure
from purecon.options import ConsoleFlags, exit_code_for, handle_arguments
from purecon.redirect import ErrorReporter, RedirectionHandle, install
from purecon.utils.process import SingleInstance

RuntimeFactory = Callable[[ConsoleFlags, AppSettings, TerminalChannel], Runtime]


@dataclass(slots=True)
class LoaderResult:
    exit_code: int
    outcome: Outcome | None = None
    flags: ConsoleFlags | None = None
    redirection: RedirectionHandle | None = None
    input_thread: InputThread | None = None
    state: RuntimeState = field(default_factory=RuntimeState)


def await_completion(runtime: Runtime, poll_interval: float = 0.5) -> Outcome:
    """Wait for the runtime to finish; Ctrl+C cancels it."""

    try:
        outcome = runtime.completion.wait(poll_interval)
        while outcome is None:
            outcome = runtime.completion.wait(poll_interval)
    except KeyboardInterrupt:
        runtime.cancel()
        outcome = runtime.completion.wait()
    return outcome


def run(
    args: Sequence[str],
    *,
    settings: AppSettings | None = None,
    exit_process: bool = True,
    runtime_factory: RuntimeFactory = build_runtime,
    namespace: Any = sys,
    stdin: TextIO | None = None,
    single_instance: bool = False,
    on_error: ErrorReporter | None = None,
    echo: Callable[[str], None] = typer.echo,
    poll_interval: float = 0.5,
) -> LoaderResult:
    state = RuntimeState()
    parsed = handle_arguments(args, exit_process=exit_process, echo=echo)
    if not isinstance(parsed, ConsoleFlags):
        return LoaderResult(exit_code=exit_code_for(parsed), state=state)
    flags = parsed
    state.advance(Phase.PARSED)

    settings = settings or load_settings()
    terminal = TerminalChannel.setup(
        flags,
        stdout=namespace.stdout,
        stdin=stdin if stdin is not None else namespace.stdin,
        prompt=settings.console.prompt,
    )
    configure_logging(settings, terminal)
    logger = get_logger("loader")

    with ExitStack() as stack:
        if single_instance:
            stack.enter_context(SingleInstance(settings.paths.lockfile))

        runtime = runtime_factory(flags, settings, terminal)
        runtime.start()
        state.advance(Phase.RUNTIME_STARTED)

        redirection = install(
            runtime.logger("stdout").info,
            runtime.logger("stderr").warning,
            namespace=namespace,
            on_error=on_error if on_error is not None else log_sink_failure,
        )
        state.advance(Phase.REDIRECTED)

        input_thread = InputThread(flags, runtime, terminal)
        input_thread.start()
        state.advance(Phase.INPUT_STARTED)

        state.advance(Phase.AWAITING)
        outcome = await_completion(runtime, poll_interval)
        state.advance(Phase.STOPPED)

    if outcome is Outcome.CANCELLED:
        logger.info("Runtime cancelled, shutting down")
    else:
        logger.info("Runtime completed, shutting down")

    return LoaderResult(
        exit_code=0,
        outcome=outcome,
        flags=flags,
        redirection=redirection,
        input_thread=input_thread,
        state=state,
    )


def main(argv: Sequence[str] | None = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    result = run(args, single_instance=True)
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
