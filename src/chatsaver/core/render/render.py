"""Markdown -> HTML rendering for the subset produced by the extractor"""

import re
from functools import partial

from loguru import logger

from chatsaver.core.errors import InvalidInputError
from chatsaver.core.render.inline import LINE_BREAK, escape_html, inline_format
from chatsaver.core.render.lists import build_list, indent_of, is_list_line, is_ordered_line
from chatsaver.core.render.placeholders import PlaceholderTable, ProtectedSpan


HEADING_RE = re.compile(r"^(#{1,4})\s+(.+)$")
HEADING_START_RE = re.compile(r"^#{1,4}\s")
RULE_RE = re.compile(r"^---+$")
QUOTE_PREFIX = "> "

# Rendered markdown sits one level under the page's own heading
HEADING_TAGS = {1: "h2", 2: "h3", 3: "h3", 4: "h4"}


def code_block_html(span: ProtectedSpan) -> str:
    """Fenced block markup: language label and copy button header, then the escaped body."""
    lang = escape_html(span.language)
    return (
        f'<div class="code-block"><div class="code-block-header">'
        f'<span class="code-lang">{lang}</span><button class="code-copy-btn">Copy code</button>'
        f'</div><pre><code class="language-{lang}">{escape_html(span.code)}</code></pre></div>'
    )


def _is_blank(line: str) -> bool:
    return line.strip() == ""


def _is_rule(line: str) -> bool:
    return RULE_RE.match(line.strip()) is not None


def _continues_region(region: list[str], line: str) -> bool:
    """After blanks, a list line of the other kind at the base indent starts a new list."""
    if not is_list_line(line):
        return False
    first = region[0]
    return indent_of(line) != indent_of(first) or is_ordered_line(line) == is_ordered_line(first)


def _list_region(lines: list[str], i: int) -> tuple[list[str], int]:
    """Contiguous list lines from i; blank lines are skipped when more list lines follow them."""
    region = []
    while i < len(lines):
        if is_list_line(lines[i]):
            region.append(lines[i])
            i += 1
            continue
        if _is_blank(lines[i]):
            j = i
            while j < len(lines) and _is_blank(lines[j]):
                j += 1
            if j < len(lines) and _continues_region(region, lines[j]):
                i = j
                continue
        break
    return region, i


def _ends_paragraph(line: str, spans: PlaceholderTable) -> bool:
    return (
        _is_blank(line)
        or HEADING_START_RE.match(line) is not None
        or is_list_line(line)
        or line.startswith(QUOTE_PREFIX)
        or _is_rule(line)
        or spans.is_fence_line(line)
    )


def render(markdown: str) -> str:
    """Render markdown to an HTML fragment, one block per line of output."""
    if markdown is None:
        raise InvalidInputError("render() requires a markdown string, got None")

    spans = PlaceholderTable(markdown)
    text = spans.protect_fences(markdown.replace("\r\n", "\n"))
    text = spans.protect_inline_code(text)
    fmt = partial(inline_format, spans=spans)

    lines = text.split("\n")
    blocks: list[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]

        span = spans.fence_at(line)
        if span is not None:
            blocks.append(code_block_html(span))
            i += 1
            continue

        if m := HEADING_RE.match(line):
            tag = HEADING_TAGS[len(m.group(1))]
            blocks.append(f"<{tag}>{fmt(m.group(2))}</{tag}>")
            i += 1
            continue

        if _is_rule(line):
            blocks.append("<hr>")
            i += 1
            continue

        if line.startswith(QUOTE_PREFIX):
            quoted = []
            while i < len(lines) and lines[i].startswith(QUOTE_PREFIX):
                quoted.append(lines[i][len(QUOTE_PREFIX):])
                i += 1
            blocks.append(f"<blockquote>{fmt(LINE_BREAK.join(quoted))}</blockquote>")
            continue

        if is_list_line(line):
            region, i = _list_region(lines, i)
            pos = 0
            while pos < len(region):
                block, pos = build_list(region, pos, fmt)
                blocks.append(block.to_html())
            continue

        if _is_blank(line):
            i += 1
            continue

        para = [line]
        i += 1
        while i < len(lines) and not _ends_paragraph(lines[i], spans):
            para.append(lines[i])
            i += 1
        blocks.append(f"<p>{fmt(LINE_BREAK.join(para))}</p>")

    logger.debug(f"Rendered {len(blocks)} blocks ({len(spans)} protected spans)")
    return "\n".join(blocks)
