"""HTML fragment -> DocumentNode tree conversion via BeautifulSoup"""

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from chatsaver.core.errors import InvalidInputError
from chatsaver.core.models import DocumentNode, ElementNode, TextNode


DOCUMENT_TAG = "#document"
PARSER = "html.parser"


def _attr_value(value) -> str:
    # bs4 returns multi-valued attributes (class, rel) as lists
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def from_soup(node: Tag) -> ElementNode:
    """Snapshot a bs4 Tag (or BeautifulSoup object) as an immutable ElementNode."""
    children: list[DocumentNode] = []
    for child in node.children:
        if isinstance(child, Tag):
            children.append(from_soup(child))
        elif isinstance(child, PreformattedString):
            continue  # comments, doctypes, CDATA
        elif isinstance(child, NavigableString):
            children.append(TextNode(str(child)))

    tag = DOCUMENT_TAG if isinstance(node, BeautifulSoup) else node.name.lower()
    attrs = {name.lower(): _attr_value(value) for name, value in (node.attrs or {}).items()}
    return ElementNode(tag=tag, attrs=attrs, children=tuple(children))


def parse_html(html: str) -> ElementNode:
    """Parse an HTML fragment into a tree rooted at a synthetic #document element."""
    if html is None:
        raise InvalidInputError("parse_html() requires an HTML string, got None")
    return from_soup(BeautifulSoup(html, PARSER))
