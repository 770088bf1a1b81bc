"""Error presentation utilities.

Centralized parse-error formatting for consistent UX.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from prdoc.output.console import Style
from prdoc.records.errors import (
    InvalidBumpLevel,
    MalformedInput,
    MissingField,
    ParseError,
    UnknownAudience,
    describe,
    record_label,
)

if TYPE_CHECKING:
    from prdoc.output.console import ConsoleProtocol

__all__ = ["print_parse_error", "print_parse_errors"]


def print_parse_error(error: ParseError, console: ConsoleProtocol) -> None:
    """Print one parse error, with a dim hint line where one helps."""
    console.error(f"{record_label(error)}: {describe(error)}")
    if error.source is not None and error.record:
        console.print(f"file: {error.source}", Style.DIM)

    match error:
        case InvalidBumpLevel():
            console.print("hint: use one of patch, minor, major", Style.DIM)
        case UnknownAudience(allowed=allowed):
            console.print(f"hint: allowed audiences: {', '.join(allowed)}", Style.DIM)
        case MissingField() | MalformedInput():
            pass


def print_parse_errors(errors: Sequence[ParseError], console: ConsoleProtocol) -> None:
    for error in errors:
        print_parse_error(error, console)
    if errors:
        noun = "record" if len(errors) == 1 else "records"
        console.newline()
        console.print(f"{len(errors)} invalid {noun}", Style.ERROR)

