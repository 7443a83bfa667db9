"""HTML rendering of parsed assistant replies."""

from html import escape

from plantcare.parsing import (
    Block,
    BulletList,
    Emphasis,
    Heading,
    NumberedCallout,
    Paragraph,
    PlainText,
    Span,
    parse_response,
)


def _text(value: str) -> str:
    return escape(value, quote=False).replace("\n", "<br>")


def render_spans(spans: tuple[Span, ...]) -> str:
    parts: list[str] = []
    for span in spans:
        match span:
            case Emphasis(text=text):
                parts.append(f'<strong class="reply-emphasis">{_text(text)}</strong>')
            case PlainText(text=text):
                parts.append(_text(text))
    return "".join(parts)


def render_block(block: Block) -> str:
    match block:
        case Heading(text=text):
            return f'<h3 class="reply-heading">{_text(text)}</h3>'
        case BulletList(items=items):
            lis = "".join(f"<li>{render_spans(item)}</li>" for item in items)
            return f'<ul class="reply-list list-disc">{lis}</ul>'
        case NumberedCallout(spans=spans):
            return f'<div class="reply-callout">{render_spans(spans)}</div>'
        case Paragraph(spans=spans):
            return f'<p class="reply-paragraph">{render_spans(spans)}</p>'
    raise TypeError(f"Unknown block type: {type(block).__name__}")


def render_html(blocks: list[Block]) -> str:
    """Render parsed blocks as escaped HTML for the chat bubble."""
    return "".join(render_block(block) for block in blocks)


def reply_to_html(text: str) -> str:
    """Parse assistant text and render it. Re-run on every display."""
    return render_html(parse_response(text))


def plain_to_html(text: str) -> str:
    """Render user or error text verbatim, keeping line breaks."""
    return _text(text)
