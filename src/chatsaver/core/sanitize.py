"""Allow-list HTML sanitizer for the cached message rendering"""

import re

from bs4 import BeautifulSoup
from bs4.element import PreformattedString, Tag

from chatsaver.core.errors import InvalidInputError
from chatsaver.core.extract.blocks import is_navigable
from chatsaver.core.tree import PARSER


ALLOWED_TAGS = frozenset({
    "p", "br", "strong", "b", "em", "i", "u", "a",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li",
    "pre", "code", "blockquote",
    "table", "thead", "tbody", "tr", "th", "td",
    "hr", "img", "span", "div", "sup", "sub",
})
ALLOWED_ATTRS = frozenset({"href", "src", "alt", "class", "target", "rel"})
URL_ATTRS = ("href", "src")
CODE_LANGUAGE_RE = re.compile(r"language-\S+")


def _clean_attrs(el: Tag) -> None:
    for name in list(el.attrs):
        if name not in ALLOWED_ATTRS:
            del el[name]

    for name in URL_ATTRS:
        if name in el.attrs and not is_navigable(el[name]):
            del el[name]

    # class survives only as the language marker on <code>
    classes = el.get("class")
    if classes is None:
        return
    joined = " ".join(classes) if isinstance(classes, list) else classes
    m = CODE_LANGUAGE_RE.search(joined) if el.name == "code" else None
    if m:
        el["class"] = [m.group(0)]
    else:
        del el["class"]


def _clean(node: Tag) -> None:
    for child in list(node.children):
        if isinstance(child, PreformattedString):
            child.extract()
            continue
        if not isinstance(child, Tag):
            continue
        # Descendants first, so unwrapped children are already clean
        _clean(child)
        if child.name.lower() not in ALLOWED_TAGS:
            child.unwrap()
            continue
        _clean_attrs(child)


def sanitize_tree(root: Tag) -> str:
    """Sanitize root's descendants in place and return its inner HTML."""
    _clean(root)
    return root.decode_contents().strip()


def sanitize_html(raw_html: str) -> str:
    """Restrict an HTML fragment to ALLOWED_TAGS/ALLOWED_ATTRS.

    Disallowed elements are replaced by their (sanitized) children rather than
    deleted; comments and other markup declarations are dropped.
    """
    if raw_html is None:
        raise InvalidInputError("sanitize_html() requires an HTML string, got None")
    return sanitize_tree(BeautifulSoup(raw_html, PARSER))
