import io
import sys

import pytest
from loguru import logger

from purecon import logging as purecon_logging
from purecon.config import AppPaths, AppSettings
from purecon.console.terminal import TerminalChannel
from purecon.options import ConsoleFlags


@pytest.fixture
def fresh_logging(monkeypatch):
    monkeypatch.setattr(purecon_logging, "_LOGGER_CONFIGURED", False)
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_console_sink_writes_to_terminal_without_colors(tmp_path, fresh_logging):
    out = io.StringIO()
    flags = ConsoleFlags(no_console=True, drop_ansi=True, setup_ansi=False)
    terminal = TerminalChannel(flags, stdout=out, stdin=io.StringIO())
    settings = AppSettings(paths=AppPaths(base_dir=tmp_path))

    purecon_logging.configure_logging(settings, terminal)
    purecon_logging.get_logger("stdout").info("hello {braces}")

    text = out.getvalue()
    assert text.endswith("| stdout | hello {braces}\n")
    assert "\x1b[" not in text
    assert text.count("\n") == 1
    assert settings.paths.logs_dir.exists()


def test_configure_logging_runs_once(tmp_path, fresh_logging):
    out = io.StringIO()
    terminal = TerminalChannel(ConsoleFlags(no_console=True), stdout=out, stdin=io.StringIO())
    settings = AppSettings(paths=AppPaths(base_dir=tmp_path))
    purecon_logging.configure_logging(settings, terminal)
    purecon_logging.configure_logging(settings, terminal)
    purecon_logging.get_logger().info("once")
    assert out.getvalue().count("once") == 1
