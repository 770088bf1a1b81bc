"""Change record parsing and serialisation.

A record is a YAML document:

    title: Balances: hold accounting overhaul
    doc:
      - audience: Runtime Dev
        description: |
          Held balance no longer counts towards the free balance.
    crates:
      - name: pallet-balances
        bump: major

`parse_record` never raises for bad input; it returns `Err(ParseError)`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from prdoc.core.config import DEFAULT_AUDIENCES, RecordsConfig
from prdoc.core.result import Err, Ok, Result
from prdoc.core.structured import ObjList, StrDict, as_obj_list, as_str_dict
from prdoc.records.errors import (
    InvalidBumpLevel,
    MalformedInput,
    MissingField,
    ParseError,
    UnknownAudience,
)
from prdoc.records.model import ChangeRecord, CrateBump, DocEntry, is_bump_level

__all__ = ["ParseOptions", "dump_record", "load_record", "parse_record", "unmodelled_fields"]

KNOWN_FIELDS = ("title", "doc", "crates")
DOC_FIELDS = ("audience", "description")
CRATE_FIELDS = ("name", "bump")


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Validation knobs.

    Required fields are always enforced. `strict` additionally rejects
    audiences outside `audiences` and unknown top-level fields.
    """

    strict: bool = False
    audiences: tuple[str, ...] = DEFAULT_AUDIENCES

    @classmethod
    def from_config(cls, records: RecordsConfig) -> ParseOptions:
        return cls(strict=records.strict, audiences=records.audiences)


class _Context:
    """Carries the record label and source into every error."""

    def __init__(self, source: Path | None) -> None:
        self.source = source
        self.title: str | None = None

    def missing(self, field: str) -> Err[ParseError]:
        return Err(MissingField(field=field, record=self.title, source=self.source))

    def malformed(self, field: str, reason: str) -> Err[ParseError]:
        return Err(
            MalformedInput(reason=reason, field=field, record=self.title, source=self.source)
        )


def parse_record(
    text: str,
    *,
    source: Path | None = None,
    options: ParseOptions | None = None,
) -> Result[ChangeRecord, ParseError]:
    """Parse one change record from YAML text."""
    opts = options or ParseOptions()
    ctx = _Context(source)

    try:
        obj: object = yaml.safe_load(text)
    except yaml.YAMLError as e:
        return Err(MalformedInput(reason=f"invalid YAML: {e}", source=source))

    if obj is None:
        return Err(MalformedInput(reason="document is empty", source=source))

    data = as_str_dict(obj)
    if data is None:
        return Err(MalformedInput(reason="document root must be a mapping", source=source))

    title = _parse_title(data, ctx)
    if isinstance(title, Err):
        return title
    ctx.title = title.value

    if opts.strict:
        for key in data:
            if key not in KNOWN_FIELDS:
                return ctx.malformed(key, "unknown field")

    if "crates" not in data or data["crates"] is None:
        return ctx.missing("crates")

    entries = _parse_doc(data.get("doc"), ctx, opts)
    if isinstance(entries, Err):
        return entries

    crates = _parse_crates(data["crates"], ctx)
    if isinstance(crates, Err):
        return crates

    return Ok(
        ChangeRecord(
            title=title.value,
            entries=entries.value,
            crates=crates.value,
            source=source,
        )
    )


def _parse_title(data: StrDict, ctx: _Context) -> Result[str, ParseError]:
    value = data.get("title")
    if value is None:
        return ctx.missing("title")
    if not isinstance(value, str):
        return ctx.malformed("title", f"expected text, got {type(value).__name__}")
    title = value.strip()
    if not title:
        return ctx.missing("title")
    return Ok(title)


def _parse_doc(
    value: object, ctx: _Context, opts: ParseOptions
) -> Result[tuple[DocEntry, ...], ParseError]:
    if value is None:
        return Ok(())

    items = as_obj_list(value)
    if items is None:
        return ctx.malformed("doc", "expected a list")

    entries: list[DocEntry] = []
    for i, item in enumerate(items):
        path = f"doc[{i}]"
        d = as_str_dict(item)
        if d is None:
            return ctx.malformed(path, "expected a mapping")

        description = d.get("description")
        if description is None:
            description = ""
        if not isinstance(description, str):
            return ctx.malformed(f"{path}.description", "expected text")

        audiences = _parse_audiences(d.get("audience"), f"{path}.audience", ctx, opts)
        if isinstance(audiences, Err):
            return audiences

        for audience in audiences.value:
            entries.append(DocEntry(audience=audience, description=description, group=i))

    return Ok(tuple(entries))


def _parse_audiences(
    value: object, path: str, ctx: _Context, opts: ParseOptions
) -> Result[tuple[str | None, ...], ParseError]:
    raw: ObjList
    if value is None:
        return Ok((None,))
    if isinstance(value, str):
        raw = [value]
    else:
        listed = as_obj_list(value)
        if listed is None:
            return ctx.malformed(path, "expected text or a list of text")
        raw = listed

    audiences: list[str | None] = []
    for item in raw:
        if not isinstance(item, str):
            return ctx.malformed(path, "expected text or a list of text")
        audience = item.strip() or None
        if audience is not None and opts.strict and audience not in opts.audiences:
            return Err(
                UnknownAudience(
                    field=path,
                    audience=audience,
                    allowed=opts.audiences,
                    record=ctx.title,
                    source=ctx.source,
                )
            )
        audiences.append(audience)

    return Ok(tuple(audiences) or (None,))


def _parse_crates(value: object, ctx: _Context) -> Result[tuple[CrateBump, ...], ParseError]:
    items = as_obj_list(value)
    if items is None:
        return ctx.malformed("crates", "expected a list")

    crates: list[CrateBump] = []
    for i, item in enumerate(items):
        path = f"crates[{i}]"
        d = as_str_dict(item)
        if d is None:
            return ctx.malformed(path, "expected a mapping")

        name = d.get("name")
        if name is None or (isinstance(name, str) and not name.strip()):
            return ctx.missing(f"{path}.name")
        if not isinstance(name, str):
            return ctx.malformed(f"{path}.name", "expected text")

        bump = d.get("bump")
        if bump is None:
            return ctx.missing(f"{path}.bump")
        if not is_bump_level(bump):
            return Err(
                InvalidBumpLevel(
                    field=f"{path}.bump", value=bump, record=ctx.title, source=ctx.source
                )
            )

        crates.append(CrateBump(name=name.strip(), bump=bump))

    return Ok(tuple(crates))


def load_record(
    path: Path, *, options: ParseOptions | None = None
) -> Result[ChangeRecord, ParseError]:
    """Read and parse a record file. Read failures are reported as MalformedInput."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(MalformedInput(reason=f"cannot read file: {e}", source=path))
    return parse_record(text, source=path, options=options)


class _RecordDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    # Multi-line descriptions stay readable as literal blocks.
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_RecordDumper.add_representer(str, _represent_str)


def _doc_items(entries: tuple[DocEntry, ...]) -> list[dict[str, object]]:
    # Entries sharing a group were one doc item with an audience list.
    items: list[dict[str, object]] = []
    audiences: list[list[str]] = []
    last_group: int | None = None
    for entry in entries:
        if items and entry.group is not None and entry.group == last_group:
            if entry.audience is not None:
                audiences[-1].append(entry.audience)
            continue
        items.append({"description": entry.description})
        audiences.append([entry.audience] if entry.audience is not None else [])
        last_group = entry.group

    doc: list[dict[str, object]] = []
    for item, listed in zip(items, audiences, strict=True):
        if len(listed) == 1:
            doc.append({"audience": listed[0], **item})
        elif listed:
            doc.append({"audience": listed, **item})
        else:
            doc.append(item)
    return doc


def dump_record(record: ChangeRecord) -> str:
    """Serialise a record to canonical YAML (title, doc, crates)."""
    payload: dict[str, object] = {"title": record.title}
    if record.entries:
        payload["doc"] = _doc_items(record.entries)
    payload["crates"] = [{"name": c.name, "bump": c.bump} for c in record.crates]

    return yaml.dump(
        payload,
        Dumper=_RecordDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=100,
    )


def _extra_keys(value: object, allowed: tuple[str, ...], prefix: str) -> list[str]:
    found: list[str] = []
    for i, item in enumerate(as_obj_list(value) or []):
        d = as_str_dict(item)
        if d is None:
            continue
        found.extend(f"{prefix}[{i}].{key}" for key in d if key not in allowed)
    return found


def _has_comments(text: str) -> bool:
    # Comments never reach the token stream; a '#' outside every scalar is one.
    spans = [
        (token.start_mark.index, token.end_mark.index)
        for token in yaml.scan(text)
        if isinstance(token, yaml.ScalarToken)
    ]
    for pos, char in enumerate(text):
        if char == "#" and not any(start <= pos < end for start, end in spans):
            return True
    return False


def unmodelled_fields(text: str) -> list[str]:
    """Name the parts of a record document that `dump_record` would drop.

    Covers unknown top-level fields, unknown keys inside doc and crate items,
    and comments. The text must already parse as a record.
    """
    data = as_str_dict(yaml.safe_load(text)) or {}
    found = [key for key in data if key not in KNOWN_FIELDS]
    found.extend(_extra_keys(data.get("doc"), DOC_FIELDS, "doc"))
    found.extend(_extra_keys(data.get("crates"), CRATE_FIELDS, "crates"))
    if _has_comments(text):
        found.append("comments")
    return found
