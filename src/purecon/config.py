"""Application configuration models and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class AppPaths(BaseModel):
    """Resolved directories for purecon runtime assets."""

    base_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("PURECON_HOME", Path.home() / ".purecon"))
    )

    @property
    def logs_dir(self) -> Path:
        return self.base_dir / "logs"

    @property
    def lockfile(self) -> Path:
        return self.base_dir / "purecon.lock"

    def ensure(self) -> None:
        for path in (self.base_dir, self.logs_dir):
            path.mkdir(parents=True, exist_ok=True)


class LoggingSettings(BaseModel):
    level: LogLevel = "INFO"
    file_level: LogLevel = "DEBUG"
    rotation: str = "1 week"
    retention: int = Field(default=4, ge=1, le=52)
    compression: str | None = "zip"


class ConsoleSettings(BaseModel):
    prompt: str = "> "
    stop_command: str = "stop"


class AppSettings(BaseModel):
    app_name: str = "purecon"
    paths: AppPaths = Field(default_factory=AppPaths)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    console: ConsoleSettings = Field(default_factory=ConsoleSettings)


def load_settings(env_path: Path | None = None) -> AppSettings:
    """Load settings from environment variables and defaults."""

    env_file = env_path or Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    overrides: dict[str, Any] = {}

    if level := os.getenv("PURECON_LOG_LEVEL"):
        overrides.setdefault("logging", {})["level"] = level.upper()

    if prompt := os.getenv("PURECON_PROMPT"):
        overrides.setdefault("console", {})["prompt"] = prompt

    settings = AppSettings(**overrides)
    settings.paths.ensure()
    return settings
