"""Document tree -> markdown extraction, plus the message-level content/HTML pair"""

import re

from bs4 import BeautifulSoup
from loguru import logger

from chatsaver.core.errors import InvalidInputError
from chatsaver.core.extract.blocks import (
    fenced_code, image, inline_code, link, quote, table_to_markdown,
)
from chatsaver.core.extract.lists import LIST_TAGS, list_block, list_item
from chatsaver.core.models import (
    DocumentNode, ElementNode, ExtractedContent, ExtractionContext, TextNode,
)
from chatsaver.core.sanitize import sanitize_tree
from chatsaver.core.tree import PARSER, from_soup


SKIP_TAGS = frozenset({"svg", "button", "nav", "style", "script"})
BOLD_TAGS = frozenset({"strong", "b"})
ITALIC_TAGS = frozenset({"em", "i"})
HEADING_RE = re.compile(r"^h([1-6])$")

# UI chrome removed from a message element before extraction and sanitization
CHROME_SELECTOR = ", ".join([
    "button", "nav", "svg", "script", "style",
    ".sr-only", '[aria-hidden="true"]', '[role="toolbar"]', ".katex-html",
])


def clean_markdown(text: str) -> str:
    """Collapse 3+ newlines to 2 and trim leading/trailing newlines."""
    return re.sub(r"\n{3,}", "\n\n", text).strip("\n")


def _extract_children(nodes: tuple[DocumentNode, ...], ctx: ExtractionContext) -> str:
    result = ""
    for node in nodes:
        result += _emit(node, ctx, result)
    return result


def _block(nodes: tuple[DocumentNode, ...], ctx: ExtractionContext) -> str:
    return clean_markdown(_extract_children(nodes, ctx.as_block()))


def _inline(nodes: tuple[DocumentNode, ...], ctx: ExtractionContext) -> str:
    return _extract_children(nodes, ctx.as_inline())


def _emit(node: DocumentNode, ctx: ExtractionContext, preceding: str) -> str:
    """Markdown for one node. Rules are checked in order; the first match wins."""
    if isinstance(node, TextNode):
        return node.text

    tag = node.tag
    if tag in SKIP_TAGS:
        return ""
    if tag == "pre":
        return fenced_code(node)
    if tag == "code":
        return inline_code(node)
    if tag == "br":
        return " " if ctx.inline else "\n"
    if tag == "p":
        if ctx.inline:
            sep = " " if preceding and not preceding[-1].isspace() else ""
            return sep + _inline(node.children, ctx)
        return "\n" + _block(node.children, ctx) + "\n"
    if tag == "div":
        return _extract_children(node.children, ctx)
    if tag in LIST_TAGS:
        return "\n" + list_block(node, ctx.indent, _extract_children)
    if tag == "li":
        return list_item(node, ctx.indent, "-", _extract_children)
    if tag in BOLD_TAGS:
        return "**" + _inline(node.children, ctx) + "**"
    if tag in ITALIC_TAGS:
        return "*" + _inline(node.children, ctx) + "*"
    if m := HEADING_RE.match(tag):
        text = _inline(node.children, ctx).strip()
        return "\n\n" + "#" * int(m.group(1)) + " " + text + "\n\n"
    if tag == "a":
        return link(_inline(node.children, ctx), node.get("href"))
    if tag == "blockquote":
        return quote(_block(node.children, ExtractionContext()))
    if tag == "table":
        return "\n" + table_to_markdown(node) + "\n"
    if tag == "img":
        return image(node)
    if tag == "hr":
        return "\n\n---\n\n"

    return _extract_children(node.children, ctx)


def extract(root: DocumentNode, ctx: ExtractionContext | None = None) -> str:
    """Convert a subtree to markdown.

    The root is classified like any other node, so a bare <table> or <pre>
    converts the same way it would inside a container. Block-mode results
    are passed through clean_markdown; inline results are returned raw.
    """
    if root is None:
        raise InvalidInputError("extract() requires a document node, got None")
    ctx = ctx or ExtractionContext()
    result = _emit(root, ctx, "")
    return result if ctx.inline else clean_markdown(result)


def extract_message(html: str, include_html: bool = True) -> ExtractedContent:
    """Markdown content and (optionally) sanitized HTML for one message element.

    Chrome matching CHROME_SELECTOR is dropped first so neither form carries it.
    """
    if html is None:
        raise InvalidInputError("extract_message() requires an HTML string, got None")

    soup = BeautifulSoup(html, PARSER)
    for el in soup.select(CHROME_SELECTOR):
        el.decompose()

    content = extract(from_soup(soup)).strip()
    content_html = sanitize_tree(soup) if include_html else None
    logger.debug(f"Extracted message: {len(content)} chars markdown, html={'yes' if content_html else 'no'}")
    return ExtractedContent(content=content, content_html=content_html or None)
