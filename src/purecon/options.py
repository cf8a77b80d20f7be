"""Startup flag parsing and help text for the console loader."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from purecon.version import __version__


@dataclass(slots=True)
class ConsoleFlags:
    """Flags selected on the command line.

    Populated once by :func:`parse` and handed to every consumer afterwards;
    nothing writes to it once parsing has finished.
    """

    no_console: bool = False
    setup_ansi: bool = True
    drop_ansi: bool = False
    safe_reading: bool = False


@dataclass(frozen=True, slots=True)
class Option:
    flag: str
    description: str


@dataclass(frozen=True, slots=True)
class HelpRequested:
    """``--help`` was given; show help and stop."""


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """An unrecognized token stopped parsing."""

    token: str
    flags: ConsoleFlags = field(default_factory=ConsoleFlags, compare=False)


ParseResult = ConsoleFlags | HelpRequested | ParseFailure


def _no_console(flags: ConsoleFlags) -> None:
    flags.no_console = True


def _dont_setup_ansi(flags: ConsoleFlags) -> None:
    flags.setup_ansi = False


def _drop_ansi(flags: ConsoleFlags) -> None:
    flags.drop_ansi = True
    flags.setup_ansi = False


def _safe_reading(flags: ConsoleFlags) -> None:
    flags.safe_reading = True


HELP_FLAG = "--help"

_ACTIONS: dict[str, Callable[[ConsoleFlags], None]] = {
    "--no-console": _no_console,
    "--dont-setup-terminal-ansi": _dont_setup_ansi,
    "--drop-ansi": _drop_ansi,
    "--safe-reading": _safe_reading,
}


def parse(args: Iterable[str]) -> ParseResult:
    """Apply *args* left to right; the first unknown token aborts parsing."""

    flags = ConsoleFlags()
    for token in args:
        if token == HELP_FLAG:
            return HelpRequested()
        action = _ACTIONS.get(token)
        if action is None:
            return ParseFailure(token=token, flags=flags)
        action(flags)
    return flags


def help_catalog(version: str = __version__) -> list[Option]:
    return [
        Option("", f"PureCon [headless console] v{version}"),
        Option("", ""),
        Option(HELP_FLAG, "Show this help"),
        Option("", ""),
        Option("--no-console", "Run without an interactive terminal"),
        Option(
            "--dont-setup-terminal-ansi",
            "[NoConsole] [Windows Only] Skip ANSI console initialization",
        ),
        Option("--drop-ansi", "[NoConsole] Strip ANSI escape sequences from output"),
        Option(
            "--safe-reading",
            "[NoConsole] Reading user input past the end of input yields an empty string\n"
            "Without this option, reading past the end of input is an error",
        ),
    ]


def render_help(catalog: list[Option] | None = None) -> str:
    """Render the option catalog as two aligned columns."""

    catalog = catalog if catalog is not None else help_catalog()
    width = max(len(option.flag) for option in catalog) + 3
    placeholder = " " * width

    lines: list[str] = []
    for option in catalog:
        if not option.flag:
            lines.append(option.description)
            continue
        first, *rest = option.description.split("\n")
        lines.append(option.flag.ljust(width) + first)
        lines.extend(placeholder + line for line in rest)
    return "\n".join(lines)


def handle_arguments(
    args: Iterable[str],
    *,
    exit_process: bool = False,
    echo: Callable[[str], None] = print,
) -> ParseResult:
    """Parse *args*, printing help when parsing does not yield flags.

    With ``exit_process`` the help and failure paths raise ``SystemExit``
    (0 and 1); otherwise the :class:`HelpRequested` or :class:`ParseFailure`
    value is returned so the caller can carry on.
    """

    result = parse(args)
    if isinstance(result, ConsoleFlags):
        return result

    if isinstance(result, ParseFailure):
        echo(f"Unknown option `{result.token}`")
    echo(render_help())
    if exit_process:
        raise SystemExit(exit_code_for(result))
    return result


def exit_code_for(result: ParseResult) -> int:
    if isinstance(result, ParseFailure):
        return 1
    return 0
