"""Parse errors for change records.

Every error names the record (its title when it could be read), the file it
came from, and the field path that failed (e.g. ``crates[2].bump``).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

ROOT_FIELD = "<root>"


@dataclass(frozen=True, slots=True)
class MissingField:
    field: str
    record: str | None = None
    source: Path | None = None


@dataclass(frozen=True, slots=True)
class InvalidBumpLevel:
    field: str
    value: object
    record: str | None = None
    source: Path | None = None


@dataclass(frozen=True, slots=True)
class MalformedInput:
    """The document cannot be read as a record at all, or a field has the wrong shape."""

    reason: str
    field: str = ROOT_FIELD
    record: str | None = None
    source: Path | None = None


@dataclass(frozen=True, slots=True)
class UnknownAudience:
    field: str
    audience: str
    allowed: tuple[str, ...]
    record: str | None = None
    source: Path | None = None


ParseError = MissingField | InvalidBumpLevel | MalformedInput | UnknownAudience


def record_label(error: ParseError) -> str:
    """Human identifier for the offending record: title, else file, else '<input>'."""
    if error.record:
        return error.record
    if error.source is not None:
        return str(error.source)
    return "<input>"


def describe(error: ParseError) -> str:
    """One-line description of a parse error, without the record label."""
    match error:
        case MissingField(field=field):
            return f"missing required field '{field}'"
        case InvalidBumpLevel(field=field, value=value):
            return f"invalid bump level {value!r} at '{field}' (expected patch, minor or major)"
        case MalformedInput(field=field, reason=reason):
            if field == ROOT_FIELD:
                return f"malformed input: {reason}"
            return f"malformed input at '{field}': {reason}"
        case UnknownAudience(field=field, audience=audience):
            return f"unknown audience {audience!r} at '{field}'"
