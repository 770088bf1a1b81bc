"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

import typer

from prdoc.core.errors import ErrorCode
from prdoc.core.result import Err, Result
from prdoc.output.console import Style
from prdoc.output.errors import print_parse_errors
from prdoc.records.loader import RecordBatch, discover_record_files, load_records

if TYPE_CHECKING:
    from prdoc.cli.context import CLIContext


T = TypeVar("T")
E = TypeVar("E")


def exit_on_error(
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.USER_ERROR,
) -> None:
    """Exit with error if result is Err, otherwise return.

    Expects error objects to have 'message' and optional 'hint' attributes.
    """
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        hint: str | None = getattr(error, "hint", None)
        ctx.console.error(message)
        if hint:
            ctx.console.print(f"hint: {hint}", Style.DIM)
        raise typer.Exit(code=int(error_code))


def load_batch(ctx: CLIContext, inputs: list[str] | None) -> RecordBatch:
    """Discover and parse records, printing progress when verbose."""
    sources: list[str | Path] = list(inputs) if inputs else [ctx.config.records_dir]
    files = discover_record_files(sources, pattern=ctx.config.records.pattern)
    if not files:
        ctx.console.warning("no change records found")

    batch = load_records(files, options=ctx.parse_options)
    if ctx.verbose:
        for path in batch.files:
            ctx.console.print(f"read {path}", Style.DIM)
        ctx.console.print(
            f"{len(batch.records)} valid, {len(batch.errors)} invalid", Style.DIM
        )
    return batch


def require_valid(ctx: CLIContext, batch: RecordBatch) -> None:
    """Print every parse error and exit non-zero if there were any."""
    if batch.errors:
        print_parse_errors(batch.errors, ctx.console)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
