from __future__ import annotations

import os
from pathlib import Path

import typer

from prdoc import __version__
from prdoc.cli.commands.changelog import changelog
from prdoc.cli.commands.check import check
from prdoc.cli.commands.fmt import fmt
from prdoc.cli.commands.plan import plan
from prdoc.cli.context import VERBOSE_ENV_VAR
from prdoc.core.config import CONFIG_ENV_VAR
from prdoc.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(check)
app.command()(changelog)
app.command()(plan)
app.command()(fmt)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Path to .prdoc.toml (overrides auto detection)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show per-file progress."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if config is not None:
        path = config.expanduser()
        if not path.is_file():
            typer.echo(f"error: --config '{path}' does not exist", err=True)
            raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
        os.environ[CONFIG_ENV_VAR] = str(path.resolve())

    if verbose:
        os.environ[VERBOSE_ENV_VAR] = "1"


def main() -> None:
    app()
