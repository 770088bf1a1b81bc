"""Aggregation, version planning and report rendering."""

from .aggregate import Aggregate, AudienceNote, AudienceSection, CrateResolution, aggregate
from .plan import PlannedBump, VersionError, build_plan, resolve_versions
from .report import ReportError, render_report, write_report
from .semver import SemVer, parse_version

__all__ = [
    "Aggregate",
    "AudienceNote",
    "AudienceSection",
    "CrateResolution",
    "PlannedBump",
    "ReportError",
    "SemVer",
    "VersionError",
    "aggregate",
    "build_plan",
    "parse_version",
    "render_report",
    "resolve_versions",
    "write_report",
]
