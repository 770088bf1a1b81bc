from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, TypeGuard


BumpLevel = Literal["patch", "minor", "major"]

# Ordered by severity, least severe first.
BUMP_LEVELS: tuple[BumpLevel, ...] = ("patch", "minor", "major")


def is_bump_level(value: object) -> TypeGuard[BumpLevel]:
    return isinstance(value, str) and value in BUMP_LEVELS


def bump_severity(level: BumpLevel) -> int:
    return BUMP_LEVELS.index(level)


def max_bump(levels: Iterable[BumpLevel]) -> BumpLevel:
    """Return the most severe level; raises ValueError on an empty iterable."""
    return max(levels, key=bump_severity)


@dataclass(frozen=True, slots=True)
class DocEntry:
    """One documentation entry of a change record.

    `description` is kept verbatim; it may contain fenced code or diagrams.
    """

    audience: str | None
    description: str
    # Index of the doc item this entry came from; entries fanned out from one
    # audience list share it.
    group: int | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class CrateBump:
    name: str
    bump: BumpLevel


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """A parsed change record. One per input document."""

    title: str
    entries: tuple[DocEntry, ...]
    crates: tuple[CrateBump, ...]
    # Where the record was read from; excluded from equality.
    source: Path | None = field(default=None, compare=False)

