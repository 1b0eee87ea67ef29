"""HTML escaping and inline markdown formatting (bold, italic, code, links, images)"""

import html
import re
from functools import partial

from chatsaver.core.extract.blocks import is_navigable
from chatsaver.core.render.placeholders import PlaceholderTable, ProtectedSpan, SpanKind


BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
ITALIC_RE = re.compile(r"(?<!\*)\*([^*]+?)\*(?!\*)")
IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
TARGET_RE = re.compile(r"\]\(([^)]+)\)")
ESCAPED_BR_RE = re.compile(r"&lt;br\s*/?&gt;")

LINE_BREAK = "<br>"


def escape_html(text: str) -> str:
    """Escape &, < and > (quotes are left alone in text content)."""
    return html.escape(text, quote=False)


def _attr(value: str) -> str:
    # value is already &<>-escaped; only the attribute delimiter remains
    return value.replace('"', "&quot;")


def _protect_target(m: re.Match, spans: PlaceholderTable) -> str:
    return "](" + spans.add(ProtectedSpan(SpanKind.url, m.group(1))) + ")"


def _target(token: str, spans: PlaceholderTable) -> str:
    return spans.restore(token, lambda span: span.code)


def _image(m: re.Match, spans: PlaceholderTable) -> str:
    alt, src = m.group(1), _target(m.group(2), spans)
    if not is_navigable(html.unescape(src)):
        return alt
    return f'<img src="{_attr(src)}" alt="{_attr(alt)}">'


def _link(m: re.Match, spans: PlaceholderTable) -> str:
    text, href = m.group(1), _target(m.group(2), spans)
    if not is_navigable(html.unescape(href)):
        return text
    return f'<a href="{_attr(href)}" target="_blank" rel="noopener">{text}</a>'


def _restore(span: ProtectedSpan) -> str:
    # a target with no [text] before it stays plain text
    if span.kind == SpanKind.url:
        return span.code
    return f"<code>{escape_html(span.code)}</code>"


def inline_format(text: str, spans: PlaceholderTable) -> str:
    """Escape text, apply inline markdown, then restore protected code spans.

    Link and image targets are lifted out before emphasis so a `*` in a URL
    never becomes markup. Bold runs before italic so `**x**` never yields
    nested <em>. Code spans are restored last so their contents are never
    formatted. A fence token that is not alone on its line comes back as
    inline <code>.
    """
    out = escape_html(text)
    out = TARGET_RE.sub(partial(_protect_target, spans=spans), out)
    out = BOLD_RE.sub(r"<strong>\1</strong>", out)
    out = ITALIC_RE.sub(r"<em>\1</em>", out)
    out = IMAGE_RE.sub(partial(_image, spans=spans), out)
    out = LINK_RE.sub(partial(_link, spans=spans), out)
    out = spans.restore(out, _restore)
    return ESCAPED_BR_RE.sub(LINE_BREAK, out)
