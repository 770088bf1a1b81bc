"""Version bump plan: resolved bumps applied to current crate versions.

Current versions come from a TOML file:

    [versions]
    pallet-balances = "39.0.0"
    pallet-assets = "0.41.2"

and/or from `NAME=VERSION` overrides given on the command line. Overrides win.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from prdoc.core.result import Err, Ok, Result
from prdoc.core.structured import as_str_dict, get_table
from prdoc.records.model import BumpLevel
from prdoc.services.aggregate import Aggregate
from prdoc.services.semver import SemVer, parse_version


@dataclass(frozen=True, slots=True)
class VersionError:
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class PlannedBump:
    name: str
    bump: BumpLevel
    current: SemVer | None
    next: SemVer | None


def build_plan(aggregate: Aggregate, versions: Mapping[str, SemVer]) -> tuple[PlannedBump, ...]:
    plan: list[PlannedBump] = []
    for crate in aggregate.crates:
        current = versions.get(crate.name)
        plan.append(
            PlannedBump(
                name=crate.name,
                bump=crate.bump,
                current=current,
                next=current.bump(crate.bump) if current is not None else None,
            )
        )
    return tuple(plan)


def _parse_table(table: Mapping[str, object], *, hint: str) -> Result[dict[str, SemVer], VersionError]:
    out: dict[str, SemVer] = {}
    for name, raw in table.items():
        parsed = parse_version(raw) if isinstance(raw, str) else None
        if parsed is None:
            return Err(VersionError(message=f"invalid version for {name}: {raw!r}", hint=hint))
        out[name] = parsed
    return Ok(out)


def load_versions_file(path: Path) -> Result[dict[str, SemVer], VersionError]:
    try:
        data_obj: object = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(VersionError(message=f"failed to read versions file: {e}", hint=str(path)))
    except tomllib.TOMLDecodeError as e:
        return Err(VersionError(message=f"invalid TOML in versions file: {e}", hint=str(path)))

    data = as_str_dict(data_obj) or {}
    table = get_table(data, "versions")
    if table is None:
        return Err(VersionError(message="versions file has no [versions] table", hint=str(path)))
    return _parse_table(table, hint=str(path))


def parse_overrides(items: Sequence[str]) -> Result[dict[str, SemVer], VersionError]:
    """Parse `NAME=VERSION` items."""
    table: dict[str, object] = {}
    for item in items:
        name, sep, version = item.partition("=")
        if not sep or not name.strip():
            return Err(VersionError(message=f"invalid --current value: {item!r}", hint="NAME=X.Y.Z"))
        table[name.strip()] = version
    return _parse_table(table, hint="NAME=X.Y.Z")


def resolve_versions(
    *, versions_file: Path | None, overrides: Sequence[str]
) -> Result[dict[str, SemVer], VersionError]:
    versions: dict[str, SemVer] = {}
    if versions_file is not None:
        loaded = load_versions_file(versions_file)
        if isinstance(loaded, Err):
            return loaded
        versions.update(loaded.value)

    parsed = parse_overrides(overrides)
    if isinstance(parsed, Err):
        return parsed
    versions.update(parsed.value)
    return Ok(versions)
