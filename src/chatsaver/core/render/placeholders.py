"""Typed side table of code spans and link targets lifted out of markdown before formatting"""

import re
import secrets
from dataclasses import dataclass
from enum import Enum


class SpanKind(str, Enum):
    fence  = "F"
    inline = "I"
    url    = "U"


@dataclass(frozen=True)
class ProtectedSpan:
    kind:     SpanKind
    code:     str
    language: str = ""


FENCE_RE = re.compile(r"```(\w*)\n([\s\S]*?)```")
INLINE_CODE_RE = re.compile(r"`([^`\n]+)`")
DEFAULT_LANGUAGE = "plaintext"


class PlaceholderTable:
    """Spans replaced by opaque tokens for the duration of one render() call.

    Tokens embed a random nonce that is checked against the source text, so no
    input can contain (or forge) a token.
    """

    def __init__(self, source: str):
        nonce = secrets.token_hex(6)
        while nonce in source:
            nonce = secrets.token_hex(6)
        self._prefix = f"\x00{nonce}"
        self._spans: list[ProtectedSpan] = []
        self._token_re = re.compile(re.escape(self._prefix) + r"([FIU])(\d+)\x00")
        self._fence_line_re = re.compile(r"^" + re.escape(self._prefix) + r"F(\d+)\x00$")

    def __len__(self) -> int:
        return len(self._spans)

    def add(self, span: ProtectedSpan) -> str:
        self._spans.append(span)
        return f"{self._prefix}{span.kind.value}{len(self._spans) - 1}\x00"

    def protect_fences(self, text: str) -> str:
        """Replace ```lang ... ``` blocks; code keeps leading space, loses trailing whitespace."""
        return FENCE_RE.sub(
            lambda m: self.add(ProtectedSpan(
                SpanKind.fence, m.group(2).rstrip(), m.group(1) or DEFAULT_LANGUAGE,
            )),
            text,
        )

    def protect_inline_code(self, text: str) -> str:
        """Replace single-backtick spans. Must run after protect_fences."""
        return INLINE_CODE_RE.sub(lambda m: self.add(ProtectedSpan(SpanKind.inline, m.group(1))), text)

    def fence_at(self, line: str) -> ProtectedSpan | None:
        """The fenced span when line consists of exactly one fence token."""
        m = self._fence_line_re.match(line)
        return self._spans[int(m.group(1))] if m else None

    def is_fence_line(self, line: str) -> bool:
        return self._fence_line_re.match(line) is not None

    def restore(self, text: str, render_span) -> str:
        """Substitute every token in text with render_span(span)."""
        return self._token_re.sub(lambda m: render_span(self._spans[int(m.group(2))]), text)
