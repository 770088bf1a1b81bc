from __future__ import annotations

from pathlib import Path

import typer

from prdoc.cli.commands._helpers import exit_on_error, load_batch, require_valid
from prdoc.cli.context import build_context
from prdoc.output.console import Style
from prdoc.services.aggregate import aggregate
from prdoc.services.plan import PlannedBump, build_plan, resolve_versions


def plan(
    inputs: list[str] | None = typer.Argument(
        None, help="Record files, directories or globs (default: configured dir)"
    ),
    versions: Path | None = typer.Option(
        None, "--versions", help="TOML file with a [versions] table of current crate versions"
    ),
    current: list[str] | None = typer.Option(
        None, "--current", help="Current crate version, NAME=X.Y.Z (repeatable)"
    ),
) -> None:
    """Show the resolved bump for every crate touched by the records."""
    ctx = build_context()

    known = resolve_versions(versions_file=versions, overrides=current or [])
    exit_on_error(known, ctx)

    batch = load_batch(ctx, inputs)
    require_valid(ctx, batch)

    result = aggregate(batch.records)
    planned = build_plan(result, known.unwrap_or({}))

    ctx.console.header("Crate bumps")
    if not planned:
        ctx.console.print("no crates bumped", Style.DIM)
    for item in planned:
        ctx.console.print(_format(item))
        if ctx.verbose:
            titles = next(c.titles for c in result.crates if c.name == item.name)
            for title in titles:
                ctx.console.print(f"  from: {title}", Style.DIM)


def _format(item: PlannedBump) -> str:
    if item.current is None or item.next is None:
        return f"{item.name}: {item.bump}"
    return f"{item.name}: {item.bump} ({item.current} -> {item.next})"
