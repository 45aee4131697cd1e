"""Note parser: one Markdown file in, one :class:`Note` out.

Frontmatter values arrive with whatever shape YAML gave them. They are
classified into :data:`MetadataValue` variants first, then each note field
is resolved from the variant it expects:

- title: ``title`` string, else first ``# `` heading, else ``"Untitled"``
- tags: ``tags`` list (non-strings dropped) or a single string
- created_at: ``created`` date or ``YYYY-MM-DD`` string, else the epoch

Metadata keys match case-insensitively. A bad ``created`` value is never
an error; undecodable bytes or malformed YAML raise :class:`ParseError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from ruamel.yaml import YAMLError

from neuron.domain.content import find_first_heading, parse_frontmatter
from neuron.domain.errors import ParseError
from neuron.domain.note import (
    DEFAULT_TITLE,
    EPOCH,
    MISSING,
    MetadataValue,
    MetaDate,
    MetaString,
    MetaStringList,
    Note,
    utc_now,
)

TITLE_KEY = "title"
TAGS_KEY = "tags"
CREATED_KEY = "created"
CREATED_FORMAT = "%Y-%m-%d"


def classify(value: Any) -> MetadataValue:
    """Resolve a raw YAML value into a metadata variant."""
    if isinstance(value, str):
        return MetaString(str(value))
    # datetime is a date subclass; check it first to drop the time part.
    if isinstance(value, datetime):
        return MetaDate(value.date())
    if isinstance(value, date):
        return MetaDate(value)
    if isinstance(value, list | tuple):
        return MetaStringList(tuple(str(v) for v in value if isinstance(v, str)))
    return MISSING


def lookup(frontmatter: Mapping[Any, Any], key: str) -> MetadataValue:
    """Case-insensitive key lookup, classified. First matching key wins."""
    for raw_key, value in frontmatter.items():
        if isinstance(raw_key, str) and raw_key.lower() == key:
            return classify(value)
    return MISSING


def resolve_title(meta: MetadataValue, body: str) -> str:
    if isinstance(meta, MetaString) and meta.value.strip():
        return meta.value.strip()
    return find_first_heading(body) or DEFAULT_TITLE


def resolve_tags(meta: MetadataValue) -> list[str]:
    match meta:
        case MetaStringList(values=values):
            return [v for v in values if v]
        case MetaString(value=value) if value.strip():
            return [value.strip()]
        case _:
            return []


def resolve_created(meta: MetadataValue) -> datetime:
    match meta:
        case MetaDate(value=value):
            return datetime(value.year, value.month, value.day, tzinfo=UTC)
        case MetaString(value=value):
            try:
                parsed = datetime.strptime(value.strip(), CREATED_FORMAT)
            except ValueError:
                return EPOCH
            return parsed.replace(tzinfo=UTC)
        case _:
            return EPOCH


def parse_note(
    content: bytes | str,
    source_path: str | Path,
    *,
    now: datetime | None = None,
) -> Note:
    """Build a Note with default scheduling state from raw file content.

    Raises:
        ParseError: If *content* is not UTF-8 or the frontmatter is malformed.
    """
    path = str(source_path)
    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(path, f"not valid UTF-8 ({exc.reason})") from exc
    else:
        text = content

    try:
        frontmatter, body = parse_frontmatter(text)
    except YAMLError as exc:
        raise ParseError(path, f"malformed frontmatter: {exc}") from exc

    return Note(
        source_path=path,
        title=resolve_title(lookup(frontmatter, TITLE_KEY), body),
        tags=resolve_tags(lookup(frontmatter, TAGS_KEY)),
        body=text,
        created_at=resolve_created(lookup(frontmatter, CREATED_KEY)),
        due_at=now or utc_now(),
    )


def parse_note_file(path: Path, *, now: datetime | None = None) -> Note:
    """Read and parse a Markdown file. The note is keyed by its resolved path.

    Raises:
        ParseError: If the file cannot be read or parsed.
    """
    resolved = path.resolve()
    try:
        raw = resolved.read_bytes()
    except OSError as exc:
        raise ParseError(str(resolved), f"unreadable ({exc.strerror or exc})") from exc
    return parse_note(raw, resolved, now=now)
