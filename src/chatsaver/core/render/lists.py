"""Nested list construction from a contiguous run of indented list lines"""

import re
from dataclasses import dataclass, field
from typing import Callable


LIST_LINE_RE = re.compile(r"^\s*(?:[-*]|\d+\.)\s+")
ORDERED_LINE_RE = re.compile(r"^\s*\d+\.\s+")
LEADING_WS_RE = re.compile(r"^\s*")


@dataclass
class ListItem:
    html: str
    children: list["ListBlock"] = field(default_factory=list)

    def to_html(self) -> str:
        return "<li>" + self.html + "".join(c.to_html() for c in self.children) + "</li>"


@dataclass
class ListBlock:
    ordered: bool
    items: list[ListItem] = field(default_factory=list)

    def to_html(self) -> str:
        tag = "ol" if self.ordered else "ul"
        return f"<{tag}>" + "".join(item.to_html() for item in self.items) + f"</{tag}>"


def is_list_line(line: str) -> bool:
    return LIST_LINE_RE.match(line) is not None


def indent_of(line: str) -> int:
    """Leading whitespace width; nesting only compares these, never a fixed unit."""
    return len(LEADING_WS_RE.match(line).group(0))


def is_ordered_line(line: str) -> bool:
    return ORDERED_LINE_RE.match(line) is not None


def strip_marker(line: str) -> str:
    return LIST_LINE_RE.sub("", line, count=1)


def build_list(lines: list[str], start: int, fmt: Callable[[str], str]) -> tuple[ListBlock, int]:
    """Parse lines[start:] into a ListBlock; return it and the index of the first unconsumed line.

    The first line fixes the base indent and the ordered/unordered kind. Lines at
    the base are items; a strictly deeper run becomes a child list of the item
    before it; a shallower line ends this level. A deeper run that follows a
    child list folding back to an intermediate indent attaches to the most
    recent item as a further child list.
    """
    base = indent_of(lines[start])
    block = ListBlock(ordered=is_ordered_line(lines[start]))
    i = start

    while i < len(lines):
        indent = indent_of(lines[i])
        if indent < base:
            break

        if indent == base:
            item = ListItem(fmt(strip_marker(lines[i])))
            block.items.append(item)
            i += 1
            if i < len(lines) and indent_of(lines[i]) > base:
                child, i = build_list(lines, i, fmt)
                item.children.append(child)
            continue

        child, i = build_list(lines, i, fmt)
        block.items[-1].children.append(child)

    return block, i
