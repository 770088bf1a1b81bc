from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from prdoc.core.result import Err, Ok, Result
from prdoc.platform.files import atomic_write_text
from prdoc.services.aggregate import Aggregate
from prdoc.services.plan import PlannedBump


ReportFormat = Literal["markdown", "json"]


@dataclass(frozen=True, slots=True)
class ReportError:
    message: str
    hint: str | None = None


def _bump_line(name: str, bump: str, planned: PlannedBump | None) -> str:
    if planned is not None and planned.current is not None and planned.next is not None:
        return f"- {name}: {bump} ({planned.current} -> {planned.next})"
    return f"- {name}: {bump}"


def render_markdown(
    aggregate: Aggregate,
    *,
    title: str = "Changelog",
    plan: Sequence[PlannedBump] = (),
) -> str:
    by_name = {p.name: p for p in plan}
    lines: list[str] = []
    lines.append(f"# {title}")

    for section in aggregate.sections:
        lines.append("")
        lines.append(f"## {section.audience}")
        for note in section.notes:
            lines.append("")
            lines.append(f"### {note.title}")
            if note.description.strip():
                lines.append("")
                lines.append(note.description.rstrip())

    lines.append("")
    lines.append("## Crate bumps")
    lines.append("")
    if not aggregate.crates:
        lines.append("No crates bumped.")
    for crate in aggregate.crates:
        lines.append(_bump_line(crate.name, crate.bump, by_name.get(crate.name)))

    return "\n".join(lines).rstrip() + "\n"


def render_json(aggregate: Aggregate, *, plan: Sequence[PlannedBump] = ()) -> str:
    by_name = {p.name: p for p in plan}

    bumps: list[dict[str, object]] = []
    for crate in aggregate.crates:
        planned = by_name.get(crate.name)
        current = planned.current if planned is not None else None
        nxt = planned.next if planned is not None else None
        bumps.append(
            {
                "name": crate.name,
                "bump": crate.bump,
                "titles": list(crate.titles),
                "current": str(current) if current is not None else None,
                "next": str(nxt) if nxt is not None else None,
            }
        )

    payload: dict[str, object] = {
        "records": aggregate.record_count,
        "sections": [
            {
                "audience": s.audience,
                "notes": [{"title": n.title, "description": n.description} for n in s.notes],
            }
            for s in aggregate.sections
        ],
        "bumps": bumps,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def render_report(
    aggregate: Aggregate,
    *,
    fmt: ReportFormat,
    title: str = "Changelog",
    plan: Sequence[PlannedBump] = (),
) -> str:
    if fmt == "json":
        return render_json(aggregate, plan=plan)
    return render_markdown(aggregate, title=title, plan=plan)


def write_report(path: Path, content: str) -> Result[Path, ReportError]:
    try:
        atomic_write_text(path, content, encoding="utf-8")
    except OSError as e:
        return Err(ReportError(message=f"failed to write report: {e}", hint=str(path)))
    return Ok(path)
