"""Markdown emitters for the self-contained block constructs: code, tables, quotes, links, images"""

import re

from chatsaver.core.models import ElementNode


LANGUAGE_RE = re.compile(r"language-(\w+)")
# Browsers ignore ASCII whitespace/control characters when reading a URL scheme
_SCHEME_NOISE_RE = re.compile(r"[\x00-\x20]+")
SCRIPT_SCHEMES = ("javascript:", "vbscript:")


def code_language(node: ElementNode) -> str:
    """Language tag from a `language-xxx` class token, else ''."""
    m = LANGUAGE_RE.search(node.classes)
    return m.group(1) if m else ""


def fenced_code(pre: ElementNode) -> str:
    """Fenced block for a <pre>: nested <code> (or the pre itself) supplies text and language."""
    code = pre.find("code") or pre
    return "\n```" + code_language(code) + "\n" + code.text.strip() + "\n```\n"


def inline_code(node: ElementNode) -> str:
    # Embedded backticks are not escaped; a literal ` ends the span on re-render
    return "`" + node.text + "`"


def table_to_markdown(table: ElementNode) -> str:
    """Pipe table, one line per <tr>, with a --- separator row after the first."""
    lines = []
    for i, row in enumerate(table.find_all("tr")):
        cells = [cell.text.strip() for cell in row.find_all("th", "td")]
        lines.append("| " + " | ".join(cells) + " |\n")
        if i == 0:
            lines.append("| " + " | ".join("---" for _ in cells) + " |\n")
    return "".join(lines)


def quote(text: str) -> str:
    """Prefix every line of already-extracted block text with '> '."""
    lines = text.strip().split("\n")
    return "\n" + "\n".join("> " + line for line in lines) + "\n"


def is_navigable(href: str | None) -> bool:
    """True for a non-empty href that is not a script URI."""
    if not href:
        return False
    normalized = _SCHEME_NOISE_RE.sub("", href).lower()
    return bool(normalized) and not normalized.startswith(SCRIPT_SCHEMES)


def link(text: str, href: str | None) -> str:
    if is_navigable(href):
        return f"[{text}]({href})"
    return text


def image(node: ElementNode) -> str:
    alt = node.get("alt") or "image"
    src = node.get("src") or ""
    return f"![{alt}]({src})"
