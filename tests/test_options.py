import pytest

from purecon.options import (
    ConsoleFlags,
    HelpRequested,
    Option,
    ParseFailure,
    exit_code_for,
    handle_arguments,
    parse,
    render_help,
)


def test_no_arguments_yields_defaults():
    assert parse([]) == ConsoleFlags()


def test_recognized_flags_are_combined():
    flags = parse(["--no-console", "--safe-reading", "--dont-setup-terminal-ansi"])
    assert flags == ConsoleFlags(no_console=True, setup_ansi=False, drop_ansi=False, safe_reading=True)


@pytest.mark.parametrize(
    "args",
    [
        ["--drop-ansi"],
        ["--drop-ansi", "--dont-setup-terminal-ansi"],
        ["--dont-setup-terminal-ansi", "--drop-ansi"],
    ],
)
def test_drop_ansi_disables_ansi_setup(args):
    flags = parse(args)
    assert flags.drop_ansi is True
    assert flags.setup_ansi is False


def test_unknown_token_stops_parsing():
    result = parse(["--no-console", "--bogus", "--safe-reading"])
    assert isinstance(result, ParseFailure)
    assert result.token == "--bogus"
    assert result.flags.no_console is True
    assert result.flags.safe_reading is False
    assert exit_code_for(result) == 1


def test_help_wins_over_previous_flags():
    assert parse(["--no-console", "--help", "--bogus"]) == HelpRequested()
    assert exit_code_for(HelpRequested()) == 0


def test_flags_with_inline_values_are_unknown():
    result = parse(["--no-console=true"])
    assert isinstance(result, ParseFailure)
    assert result.token == "--no-console=true"


def test_render_help_aligns_columns():
    catalog = [
        Option("", "Title"),
        Option("-a", "short"),
        Option("--longer", "first\nsecond"),
    ]
    assert render_help(catalog).splitlines() == [
        "Title",
        "-a         short",
        "--longer   first",
        "           second",
    ]


def test_default_help_lists_every_flag():
    text = render_help()
    lines = text.splitlines()
    width = len("--dont-setup-terminal-ansi") + 3
    for flag in ("--help", "--no-console", "--dont-setup-terminal-ansi", "--drop-ansi", "--safe-reading"):
        line = next(line for line in lines if line.startswith(flag))
        assert line[width - 1] == " "
        assert line[width] != " "
    continuation = lines[-1]
    assert continuation.startswith(" " * width)
    assert not continuation[width].isspace()


def test_handle_arguments_prints_unknown_option():
    printed = []
    result = handle_arguments(["--bogus"], echo=printed.append)
    assert isinstance(result, ParseFailure)
    assert printed[0] == "Unknown option `--bogus`"
    assert "--safe-reading" in printed[1]


def test_handle_arguments_returns_flags_silently():
    printed = []
    result = handle_arguments(["--no-console"], echo=printed.append)
    assert result == ConsoleFlags(no_console=True)
    assert printed == []


@pytest.mark.parametrize(("args", "code"), [(["--help"], 0), (["--bogus"], 1)])
def test_handle_arguments_exits_process(args, code):
    printed = []
    with pytest.raises(SystemExit) as exc_info:
        handle_arguments(args, exit_process=True, echo=printed.append)
    assert exc_info.value.code == code
    assert printed
