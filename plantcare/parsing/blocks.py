"""Typed document blocks produced from assistant reply text.

Blocks and spans are tagged variants: every model carries a literal ``kind``
so renderers can match on it exhaustively.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class PlainText(BaseModel):
    """Inline text shown verbatim."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["plain"] = "plain"
    text: str


class Emphasis(BaseModel):
    """Inline text wrapped in ``**`` in the source, delimiters removed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["emphasis"] = "emphasis"
    text: str


Span = PlainText | Emphasis


class Paragraph(BaseModel):
    """Default block for any paragraph group that matches no other rule."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["paragraph"] = "paragraph"
    spans: tuple[Span, ...]


class Heading(BaseModel):
    """Short group ending with a colon. Text is never inline-formatted."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["heading"] = "heading"
    text: str


class BulletList(BaseModel):
    """Group containing at least one ``*`` or ``-`` bullet line."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    items: tuple[tuple[Span, ...], ...]


class NumberedCallout(BaseModel):
    """Group starting with ``<digits>.`` followed by whitespace."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["callout"] = "callout"
    spans: tuple[Span, ...]


Block = Paragraph | Heading | BulletList | NumberedCallout
