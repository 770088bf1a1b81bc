from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from prdoc.records.model import BumpLevel, ChangeRecord, max_bump


@dataclass(frozen=True, slots=True)
class CrateResolution:
    """Resolved bump for one crate and the records that asked for it."""

    name: str
    bump: BumpLevel
    titles: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class AudienceNote:
    title: str
    description: str


@dataclass(frozen=True, slots=True)
class AudienceSection:
    audience: str
    notes: tuple[AudienceNote, ...]


@dataclass(frozen=True, slots=True)
class Aggregate:
    # Sorted by crate name.
    crates: tuple[CrateResolution, ...]
    sections: tuple[AudienceSection, ...]
    record_count: int

    def resolved_bumps(self) -> dict[str, BumpLevel]:
        return {c.name: c.bump for c in self.crates}


def resolve_bumps(records: Sequence[ChangeRecord]) -> tuple[CrateResolution, ...]:
    """Highest requested bump per crate name across all records."""
    requested: dict[str, list[BumpLevel]] = {}
    titles: dict[str, list[str]] = {}

    for record in records:
        for crate in record.crates:
            requested.setdefault(crate.name, []).append(crate.bump)
            contributors = titles.setdefault(crate.name, [])
            if record.title not in contributors:
                contributors.append(record.title)

    return tuple(
        CrateResolution(name=name, bump=max_bump(requested[name]), titles=tuple(titles[name]))
        for name in sorted(requested)
    )


def group_by_audience(
    records: Sequence[ChangeRecord],
    *,
    audience_order: Sequence[str] = (),
    fallback_audience: str = "Unspecified",
) -> tuple[AudienceSection, ...]:
    """Partition doc entries by audience, keeping record order inside each group.

    Groups follow `audience_order` first, then order of first appearance.
    Entries without an audience land under `fallback_audience`.
    """
    groups: dict[str, list[AudienceNote]] = {}
    for record in records:
        for entry in record.entries:
            audience = entry.audience or fallback_audience
            groups.setdefault(audience, []).append(
                AudienceNote(title=record.title, description=entry.description)
            )

    ordered = [a for a in audience_order if a in groups]
    ordered.extend(a for a in groups if a not in ordered)
    return tuple(AudienceSection(audience=a, notes=tuple(groups[a])) for a in ordered)


def aggregate(
    records: Sequence[ChangeRecord],
    *,
    audience_order: Sequence[str] = (),
    fallback_audience: str = "Unspecified",
) -> Aggregate:
    """Build the per-crate bump resolution and the audience-grouped changelog.

    Pure function of its input: the same records always give the same result,
    and the records themselves are never modified.
    """
    return Aggregate(
        crates=resolve_bumps(records),
        sections=group_by_audience(
            records, audience_order=audience_order, fallback_audience=fallback_audience
        ),
        record_count=len(records),
    )
