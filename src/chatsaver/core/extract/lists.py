"""List extraction: nesting depth is encoded as two leading spaces per level"""

from typing import Callable

from chatsaver.core.models import DocumentNode, ElementNode, ExtractionContext


LIST_TAGS = ("ul", "ol")
INDENT_UNIT = "  "

# (nodes, ctx) -> text; the dispatcher in extract.py, injected to avoid a cycle
ChildExtractor = Callable[[tuple[DocumentNode, ...], ExtractionContext], str]


def is_list(node: DocumentNode) -> bool:
    return isinstance(node, ElementNode) and node.tag in LIST_TAGS


def list_item(li: ElementNode, indent: int, marker: str, extract_children: ChildExtractor) -> str:
    """One `<prefix><marker> <text>` line followed by any nested lists one level deeper."""
    inline_parts: list[DocumentNode] = []
    nested = ""
    for child in li.children:
        if is_list(child):
            nested += list_block(child, indent + 1, extract_children)
        else:
            inline_parts.append(child)

    text = extract_children(tuple(inline_parts), ExtractionContext(inline=True, indent=indent))
    return INDENT_UNIT * indent + marker + " " + text.strip() + "\n" + nested


def list_block(node: ElementNode, indent: int, extract_children: ChildExtractor) -> str:
    """Markdown for a <ul>/<ol>: one line per direct <li>, numbered from 1 when ordered."""
    ordered = node.tag == "ol"
    lines = []
    for n, li in enumerate(node.child_elements("li"), start=1):
        marker = f"{n}." if ordered else "-"
        lines.append(list_item(li, indent, marker, extract_children))
    return "".join(lines)
