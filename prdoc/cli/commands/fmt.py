from __future__ import annotations

import typer

from prdoc.cli.commands._helpers import load_batch, require_valid
from prdoc.cli.context import build_context
from prdoc.core.errors import ErrorCode
from prdoc.platform.files import atomic_write_text
from prdoc.records.parser import dump_record, unmodelled_fields


def fmt(
    inputs: list[str] | None = typer.Argument(
        None, help="Record files, directories or globs (default: configured dir)"
    ),
    check: bool = typer.Option(
        False, "--check", help="Only report files that are not in canonical form"
    ),
) -> None:
    """Rewrite change records in canonical form.

    Files holding anything the canonical form drops (unknown fields, comments)
    are left untouched and reported.
    """
    ctx = build_context()
    batch = load_batch(ctx, inputs)
    require_valid(ctx, batch)

    changed = 0
    refused = 0
    for record in batch.records:
        if record.source is None:
            continue
        canonical = dump_record(record)
        try:
            existing = record.source.read_text(encoding="utf-8")
        except OSError as e:
            ctx.console.error(f"failed to read {record.source}: {e}")
            raise typer.Exit(code=int(ErrorCode.IO_ERROR))

        lost = unmodelled_fields(existing)
        if lost:
            refused += 1
            ctx.console.error(f"cannot format {record.source} losslessly: {', '.join(lost)}")
            continue
        if existing == canonical:
            continue
        changed += 1
        if check:
            ctx.console.warning(f"would reformat {record.source}")
            continue
        try:
            atomic_write_text(record.source, canonical)
        except OSError as e:
            ctx.console.error(f"failed to write {record.source}: {e}")
            raise typer.Exit(code=int(ErrorCode.IO_ERROR))
        ctx.console.success(f"reformatted {record.source}")

    if refused or (check and changed):
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    if not changed:
        ctx.console.success(f"{len(batch.records)} records already formatted")
