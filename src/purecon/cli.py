"""Typer CLI for purecon."""

from __future__ import annotations

import json
import platform
import sys

import typer

from purecon.config import load_settings
from purecon.loader import run as run_loader
from purecon.options import help_catalog
from purecon.utils.process import read_lock_owner
from purecon.version import __version__

app = typer.Typer(no_args_is_help=True)


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    add_help_option=False,
)
def run(ctx: typer.Context) -> None:
    """Start the console. Flags are passed through to the loader (see `run --help`)."""

    result = run_loader(ctx.args, exit_process=False, single_instance=True)
    raise typer.Exit(code=result.exit_code)


@app.command()
def doctor() -> None:
    """Print environment diagnostics."""

    settings = load_settings()
    info = {
        "version": __version__,
        "python": platform.python_version(),
        "platform": platform.platform(),
        "interactive": sys.stdin.isatty() if sys.stdin else False,
        "paths": {
            "home": str(settings.paths.base_dir),
            "logs": str(settings.paths.logs_dir),
            "lock": str(settings.paths.lockfile),
        },
        "lock_owner": read_lock_owner(settings.paths.lockfile),
        "options": [option.flag for option in help_catalog() if option.flag],
    }
    typer.echo(json.dumps(info, indent=2))


@app.command()
def settings(key: str | None = typer.Argument(None)) -> None:
    """Display current settings or a specific section."""

    data = load_settings().model_dump()
    if key:
        data = data.get(key, {})
    typer.echo(json.dumps(data, indent=2, default=str))
