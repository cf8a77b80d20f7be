"""Central logging configuration using loguru."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from purecon.config import AppSettings
from purecon.console.terminal import TerminalChannel

_LOGGER_CONFIGURED = False

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[context]}</cyan> | {message}"
)


def configure_logging(settings: AppSettings, terminal: TerminalChannel) -> None:
    """Route logs to the terminal channel and a rotating file, only once.

    The console sink writes through *terminal* because ``sys.stdout`` is
    about to be redirected into loguru itself.
    """

    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return

    log_dir: Path = settings.paths.logs_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.configure(extra={"context": settings.app_name})
    emit = terminal.print_above if terminal.interactive else terminal.write_line

    def console_sink(message: str) -> None:
        emit(message.rstrip("\n"))

    logger.add(
        sink=console_sink,
        level=settings.logging.level,
        colorize=terminal.colorize,
        format=CONSOLE_FORMAT,
    )
    logger.add(
        log_dir / f"{settings.app_name}.log",
        level=settings.logging.file_level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[context]} | {message}",
        rotation=settings.logging.rotation,
        retention=settings.logging.retention,
        compression=settings.logging.compression,
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )

    _LOGGER_CONFIGURED = True


def get_logger(name: str | None = None):
    return logger.bind(context=name or "purecon")


def log_sink_failure(exc: BaseException, line: str) -> None:
    """Report a redirected line whose sink raised to the loguru error log."""

    get_logger("redirect").opt(exception=exc).error("Line sink failed for {!r}", line)
