from __future__ import annotations

import typer

from prdoc.cli.commands._helpers import load_batch, require_valid
from prdoc.cli.context import build_context


def check(
    inputs: list[str] | None = typer.Argument(
        None, help="Record files, directories or globs (default: configured dir)"
    ),
) -> None:
    """Validate change records and report every problem."""
    ctx = build_context()
    batch = load_batch(ctx, inputs)
    require_valid(ctx, batch)
    ctx.console.success(f"{len(batch.records)} records valid")
