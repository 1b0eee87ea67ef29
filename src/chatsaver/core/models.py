"""Data models for the extract/render core and the stored conversation record"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Iterator, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- document tree ---

@dataclass(frozen=True)
class TextNode:
    """A run of character data in the host tree."""
    text: str


@dataclass(frozen=True)
class ElementNode:
    """An element: lower-case tag name, attribute map and ordered children."""
    tag:      str
    attrs:    dict[str, str] = field(default_factory=dict, hash=False)
    children: tuple["DocumentNode", ...] = ()

    @property
    def text(self) -> str:
        """Concatenated text of every descendant text node (DOM textContent)."""
        return "".join(
            child.text for child in self.iter_descendants() if isinstance(child, TextNode)
        )

    @property
    def classes(self) -> str:
        return self.attrs.get("class", "")

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attrs.get(name, default)

    def iter_descendants(self) -> Iterator["DocumentNode"]:
        """Yield all descendants in document order (pre-order)."""
        for child in self.children:
            yield child
            if isinstance(child, ElementNode):
                yield from child.iter_descendants()

    def find(self, tag: str) -> Optional["ElementNode"]:
        """First descendant element with the given tag, or None."""
        return next(iter(self.find_all(tag)), None)

    def find_all(self, *tags: str) -> list["ElementNode"]:
        """All descendant elements whose tag is in tags, in document order."""
        return [
            node for node in self.iter_descendants()
            if isinstance(node, ElementNode) and node.tag in tags
        ]

    def child_elements(self, *tags: str) -> list["ElementNode"]:
        """Direct element children, optionally restricted to tags."""
        return [
            child for child in self.children
            if isinstance(child, ElementNode) and (not tags or child.tag in tags)
        ]


DocumentNode = Union[TextNode, ElementNode]


@dataclass(frozen=True)
class ExtractionContext:
    """Per-call extraction state. Never mutated; derive a new one when recursing."""
    inline: bool = False
    indent: int = 0

    def as_inline(self) -> "ExtractionContext":
        return replace(self, inline=True)

    def as_block(self) -> "ExtractionContext":
        return replace(self, inline=False)

    def nested(self) -> "ExtractionContext":
        return replace(self, indent=self.indent + 1)


@dataclass(frozen=True)
class ExtractedContent:
    """Markdown for storage/search plus the optional sanitized HTML rendering cache."""
    content: str
    content_html: str | None = None


# --- stored record ---

class Role(str, Enum):
    user = "user"
    assistant = "assistant"


class Message(BaseModel):
    """One conversation turn. `content` is canonical; `content_html` is an optional cache."""
    model_config = ConfigDict(populate_by_name=True)

    role: Role
    content: str
    content_html: Optional[str] = Field(default=None, alias="contentHtml")
    index: int = 0


class Conversation(BaseModel):
    """Stored record shape shared with the persistent store and the request service."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str
    title: str = ""
    url: str = ""
    messages: list[Message] = Field(default_factory=list)
    saved_at: Optional[datetime] = Field(default=None, alias="savedAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def to_record(self) -> dict:
        """Wire/JSON form: camelCase keys, absent contentHtml omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- capture input ---

class CaptureTurn(BaseModel):
    """One scraped message element; role is None when the host markup gives no hint."""
    role: Optional[Role] = None
    html: str


class Capture(BaseModel):
    """A page capture as written by a scraper: source site, page url, optional title and turns."""
    source: str
    url: str
    title: Optional[str] = None
    messages: list[CaptureTurn] = Field(default_factory=list)
