from __future__ import annotations

from pathlib import Path
from typing import cast

import typer

from prdoc.cli.commands._helpers import exit_on_error, load_batch, require_valid
from prdoc.cli.context import build_context
from prdoc.core.errors import ErrorCode
from prdoc.services.aggregate import aggregate
from prdoc.services.plan import build_plan, resolve_versions
from prdoc.services.report import ReportFormat, render_report, write_report


def changelog(
    inputs: list[str] | None = typer.Argument(
        None, help="Record files, directories or globs (default: configured dir)"
    ),
    out: Path | None = typer.Option(None, "--out", "-o", help="Write report here (default: stdout)"),
    fmt: str = typer.Option("markdown", "--format", help="Output format: markdown|json"),
    versions: Path | None = typer.Option(
        None, "--versions", help="TOML file with a [versions] table of current crate versions"
    ),
    current: list[str] | None = typer.Option(
        None, "--current", help="Current crate version, NAME=X.Y.Z (repeatable)"
    ),
) -> None:
    """Aggregate change records into a changelog grouped by audience."""
    ctx = build_context()

    if fmt not in ("markdown", "json"):
        ctx.console.error(f"invalid --format: {fmt}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    report_format = cast(ReportFormat, fmt)

    known = resolve_versions(versions_file=versions, overrides=current or [])
    exit_on_error(known, ctx)

    batch = load_batch(ctx, inputs)
    require_valid(ctx, batch)

    result = aggregate(
        batch.records,
        audience_order=ctx.config.records.audiences,
        fallback_audience=ctx.config.report.fallback_audience,
    )
    plan = build_plan(result, known.unwrap_or({}))
    content = render_report(
        result, fmt=report_format, title=ctx.config.report.title, plan=plan
    )

    if out is None:
        ctx.console.raw(content)
        return

    written = write_report(out, content)
    exit_on_error(written, ctx, ErrorCode.IO_ERROR)
    ctx.console.success(f"{out} ({result.record_count} records, {len(result.crates)} crates)")
