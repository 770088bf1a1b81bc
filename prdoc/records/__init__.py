"""Change record model, parsing and loading."""

from .errors import (
    InvalidBumpLevel,
    MalformedInput,
    MissingField,
    ParseError,
    UnknownAudience,
    describe,
    record_label,
)
from .loader import RecordBatch, discover_record_files, load_records
from .model import BUMP_LEVELS, BumpLevel, ChangeRecord, CrateBump, DocEntry, max_bump
from .parser import ParseOptions, dump_record, load_record, parse_record, unmodelled_fields

__all__ = [
    "BUMP_LEVELS",
    "BumpLevel",
    "ChangeRecord",
    "CrateBump",
    "DocEntry",
    "InvalidBumpLevel",
    "MalformedInput",
    "MissingField",
    "ParseError",
    "ParseOptions",
    "RecordBatch",
    "UnknownAudience",
    "describe",
    "discover_record_files",
    "dump_record",
    "load_record",
    "load_records",
    "max_bump",
    "parse_record",
    "record_label",
    "unmodelled_fields",
]
