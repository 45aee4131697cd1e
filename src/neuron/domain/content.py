"""Pure text utilities for Markdown note content.

- ``parse_frontmatter()``: split a ``---`` YAML block from the body.
- ``find_first_heading()``: first top-level ``# `` heading.
- ``extract_summary()``: the Summary / Key Takeaways sections used to
  focus question prompts.
"""

from __future__ import annotations

from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.constructor import RoundTripConstructor

_FRONTMATTER_DELIMITER = "---"
_HEADING_PREFIX = "# "
_SUMMARY_HEADINGS = ("## summary", "## key takeaways")

# Summary sections shorter than this are ignored in favour of the full body.
_MIN_SUMMARY_CHARS = 10


class _NoteConstructor(RoundTripConstructor):
    """Round-trip constructor that leaves YAML timestamps as plain text.

    ``created: 2024-02-30`` would otherwise fail inside the loader; the
    parser resolves date strings itself.
    """


_NoteConstructor.add_constructor(
    "tag:yaml.org,2002:timestamp", RoundTripConstructor.construct_yaml_str
)


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel.yaml's YAML object is stateful; a new instance per call keeps a
    failed load from leaking broken state into the next file.
    """
    y = YAML()
    y.Constructor = _NoteConstructor
    y.preserve_quotes = True
    return y


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML frontmatter and body from markdown content.

    Expects the file to start with ``---`` on the first line. The second
    ``---`` closes the YAML block. Everything after is the body.

    Handles both ``\\n`` and ``\\r\\n`` line endings.

    Returns:
        A ``(frontmatter_dict, body_text)`` tuple. If no valid
        frontmatter delimiters are found, or the block is not a mapping,
        the frontmatter is ``{}``.

    Raises:
        ruamel.yaml.YAMLError: If the YAML block is malformed.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])

    if body.startswith("\n"):
        body = body[1:]

    loaded = _new_yaml().load(yaml_block)
    if not isinstance(loaded, dict):
        return {}, body
    return dict(loaded), body


def find_first_heading(text: str) -> str | None:
    """Return the text of the first line starting with ``# ``, stripped."""
    for line in text.splitlines():
        if line.startswith(_HEADING_PREFIX):
            heading = line[len(_HEADING_PREFIX) :].strip()
            if heading:
                return heading
    return None


def extract_summary(text: str) -> str:
    """Return the Summary and Key Takeaways sections of *text*.

    Section content runs until the next ``##`` heading. Falls back to the
    full text when the sections are missing or nearly empty.
    """
    sections: dict[str, list[str]] = {heading: [] for heading in _SUMMARY_HEADINGS}
    current: str | None = None
    for line in text.splitlines():
        lowered = line.lower()
        matched = next((h for h in _SUMMARY_HEADINGS if lowered.startswith(h)), None)
        if matched is not None:
            current = matched
            continue
        if lowered.startswith("##"):
            current = None
        if current is not None:
            sections[current].append(line)

    combined = "".join(
        line + "\n" for heading in _SUMMARY_HEADINGS for line in sections[heading]
    )
    if len(combined.strip()) > _MIN_SUMMARY_CHARS:
        return combined
    return text
