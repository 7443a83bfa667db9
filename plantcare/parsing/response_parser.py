"""Parser turning loosely-structured assistant text into document blocks.

The assistant answers in a Markdown-like dialect: paragraphs separated by
blank lines, ``*``/``-`` bullets, ``Title:`` headings, ``1.`` numbered
sections and ``**bold**`` runs. Parsing is lenient: any string yields a
block sequence and malformed markup degrades to plain text.
"""

import re

from plantcare.parsing.blocks import (
    Block,
    BulletList,
    Emphasis,
    Heading,
    NumberedCallout,
    Paragraph,
    PlainText,
    Span,
)

# Constants
MAX_HEADING_LENGTH = 100

_PARAGRAPH_BREAK = re.compile(r"\n{2,}")
_BULLET_LINE = re.compile(r"^\s*[*-]\s+(?=\S)")
_NUMBERED_START = re.compile(r"^\d+\.\s")
_EMPHASIS_RUN = re.compile(r"(\*\*[^*]+\*\*)")


def format_inline(text: str) -> tuple[Span, ...]:
    """Split text into plain and emphasised spans.

    ``re.split`` with a capturing group alternates between unmatched text
    (even indices) and ``**...**`` runs (odd indices). Stray asterisks never
    match the run pattern and so stay in the plain text.
    """
    spans: list[Span] = []
    for index, token in enumerate(_EMPHASIS_RUN.split(text)):
        if not token:
            continue
        if index % 2:
            spans.append(Emphasis(text=token[2:-2]))
        else:
            spans.append(PlainText(text=token))
    return tuple(spans)


def split_paragraphs(text: str) -> list[str]:
    """Split text into trimmed, non-empty paragraph groups in source order."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    groups = (group.strip() for group in _PARAGRAPH_BREAK.split(normalized))
    return [group for group in groups if group]


def _is_bullet(line: str) -> bool:
    return _BULLET_LINE.match(line) is not None


def _is_heading(group: str) -> bool:
    return group.endswith(":") and len(group) < MAX_HEADING_LENGTH


def _is_numbered(group: str) -> bool:
    return _NUMBERED_START.match(group) is not None


def _classify_text(group: str) -> Block:
    """Classify a group already known not to be a list."""
    if _is_heading(group):
        return Heading(text=group)
    if _is_numbered(group):
        return NumberedCallout(spans=format_inline(group))
    return Paragraph(spans=format_inline(group))


def _parse_list(lines: list[str]) -> list[Block]:
    """Build a bullet list, emitting any lead-in text as its own block.

    Lines before the first bullet are the lead-in. After that, each bullet
    opens a new item and plain lines continue the current one.
    """
    lead_in: list[str] = []
    items: list[str] = []

    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        if _is_bullet(line):
            items.append(_BULLET_LINE.sub("", line, count=1).strip())
        elif items:
            items[-1] = f"{items[-1]} {stripped}"
        else:
            lead_in.append(stripped)

    blocks: list[Block] = []
    if lead_in:
        blocks.append(_classify_text("\n".join(lead_in)))
    blocks.append(BulletList(items=tuple(format_inline(item) for item in items)))
    return blocks


def parse_group(group: str) -> list[Block]:
    """Classify one trimmed paragraph group.

    Rules are tried in a fixed order and the first match wins:
    list, heading, numbered callout, paragraph.
    """
    lines = group.split("\n")
    if any(_is_bullet(line) for line in lines):
        return _parse_list(lines)
    return [_classify_text(group)]


def parse_response(text: str) -> list[Block]:
    """Parse assistant reply text into an ordered list of blocks.

    Args:
        text: Raw reply text as returned by the assistant.

    Returns:
        Blocks in source order. Empty or whitespace-only text gives ``[]``.
    """
    blocks: list[Block] = []
    for group in split_paragraphs(text):
        blocks.extend(parse_group(group))
    return blocks
