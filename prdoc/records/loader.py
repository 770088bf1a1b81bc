"""Record discovery and batch loading.

A batch never stops at the first bad file: every file is parsed and every
error is collected, so all problems can be fixed in one pass.
"""

from __future__ import annotations

import glob
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from prdoc.core.result import Err, Ok
from prdoc.records.errors import ParseError
from prdoc.records.model import ChangeRecord
from prdoc.records.parser import ParseOptions, load_record

__all__ = ["RecordBatch", "discover_record_files", "load_records"]

_GLOB_CHARS = ("*", "?", "[")


@dataclass(frozen=True, slots=True)
class RecordBatch:
    records: tuple[ChangeRecord, ...]
    errors: tuple[ParseError, ...]
    files: tuple[Path, ...]

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_glob(text: str) -> bool:
    return any(ch in text for ch in _GLOB_CHARS)


def discover_record_files(inputs: Sequence[str | Path], *, pattern: str = "*.prdoc") -> list[Path]:
    """Expand files, directories and glob patterns into a sorted, de-duplicated list.

    Directories are searched recursively with `pattern`. Paths that do not exist
    are kept so that loading reports them as unreadable instead of silently
    dropping them.
    """
    found: set[Path] = set()
    for raw in inputs:
        text = str(raw)
        if _is_glob(text):
            for match in glob.glob(text, recursive=True):
                p = Path(match)
                if p.is_file():
                    found.add(p)
            continue

        p = Path(text)
        if p.is_dir():
            found.update(c for c in p.rglob(pattern) if c.is_file())
        else:
            found.add(p)

    return sorted(found)


def load_records(
    paths: Iterable[Path], *, options: ParseOptions | None = None
) -> RecordBatch:
    """Parse every path; failed records are reported in `errors` and left out of `records`."""
    files = tuple(paths)
    records: list[ChangeRecord] = []
    errors: list[ParseError] = []

    for path in files:
        match load_record(path, options=options):
            case Ok(value=record):
                records.append(record)
            case Err(error=error):
                errors.append(error)

    return RecordBatch(records=tuple(records), errors=tuple(errors), files=files)
