"""Reply parsing utilities for assistant messages.

Transforms loosely-structured assistant text into typed document blocks.

Responsibilities:
    - Paragraph segmentation on blank lines
    - Block classification (list, heading, numbered callout, paragraph)
    - Inline ``**emphasis**`` extraction

Parsing is a pure projection of the text: it is recomputed on every render
and never fails, whatever the input.
"""

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
from plantcare.parsing.response_parser import format_inline, parse_response

__all__ = [
    "Block",
    "BulletList",
    "Emphasis",
    "Heading",
    "NumberedCallout",
    "Paragraph",
    "PlainText",
    "Span",
    "format_inline",
    "parse_response",
]
