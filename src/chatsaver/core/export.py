"""Export: build Markdown/HTML documents for stored conversations and write them to disk"""

import re
from pathlib import Path

import yaml
from bs4 import BeautifulSoup
from loguru import logger

from chatsaver.core.models import Conversation, Message, Role
from chatsaver.core.render.inline import escape_html
from chatsaver.core.render.render import render
from chatsaver.core.tree import PARSER
from chatsaver.core.utils.slug import safe_filename


EXPORT_FORMATS = ("md", "html")
ASSISTANT_LABELS = {"chatgpt": "ChatGPT", "claude": "Claude"}
USER_LABEL = "You"
CODE_LANG_RE = re.compile(r"language-(\S+)")
DATE_FORMAT = "%Y-%m-%d %H:%M"


def assistant_label(source: str) -> str:
    return ASSISTANT_LABELS.get((source or "").lower(), "Assistant")


def role_label(message: Message, source: str) -> str:
    return USER_LABEL if message.role == Role.user else assistant_label(source)


def _date(conv: Conversation) -> str:
    ts = conv.updated_at or conv.saved_at
    return ts.strftime(DATE_FORMAT) if ts else "Unknown"


def build_frontmatter(conv: Conversation) -> str:
    """YAML frontmatter block for a conversation; absent timestamps are left out."""
    fm = {
        "title": conv.title,
        "source": conv.source,
        "url": conv.url,
        "id": conv.id,
    }
    if conv.saved_at:
        fm["saved_at"] = conv.saved_at.isoformat()
    if conv.updated_at:
        fm["updated_at"] = conv.updated_at.isoformat()
    header = yaml.dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{header}---\n"


def build_markdown(conv: Conversation) -> str:
    """Frontmatter, title and date header, then one `### <label>` section per message."""
    parts = [
        build_frontmatter(conv),
        f"# {conv.title or 'Untitled'}\n",
        f"**Date:** {_date(conv)}\n",
        "---\n",
    ]
    for msg in conv.messages:
        parts.append(f"### {role_label(msg, conv.source)}\n\n{msg.content}\n")
    return "\n".join(parts)


def wrap_code_blocks(fragment: str) -> str:
    """Wrap each bare <pre> in the code-block container with a language label and copy button."""
    soup = BeautifulSoup(fragment, PARSER)
    for pre in soup.find_all("pre"):
        parent = pre.parent
        if parent is not None and "code-block" in (parent.get("class") or []):
            continue

        code = pre.find("code")
        m = CODE_LANG_RE.search(" ".join(code.get("class") or [])) if code else None

        label = soup.new_tag("span", attrs={"class": "code-lang"})
        label.string = m.group(1) if m else "code"
        button = soup.new_tag("button", attrs={"class": "code-copy-btn"})
        button.string = "Copy code"
        header = soup.new_tag("div", attrs={"class": "code-block-header"})
        header.append(label)
        header.append(button)

        wrapper = pre.wrap(soup.new_tag("div", attrs={"class": "code-block"}))
        wrapper.insert(0, header)
    return str(soup)


def message_html(msg: Message, source: str) -> str:
    """Stored sanitized HTML when present, otherwise the markdown content rendered."""
    content = wrap_code_blocks(msg.content_html) if msg.content_html else render(msg.content)
    role = msg.role.value
    return (
        f'<div class="message {role}">'
        f'<div class="message-role">{role_label(msg, source)}</div>'
        f'<div class="message-content">{content}</div>'
        f'</div>'
    )


def build_html(conv: Conversation) -> str:
    """HTML fragment: escaped title heading followed by one div per message."""
    blocks = [f"<h1>{escape_html(conv.title or 'Untitled')}</h1>"]
    blocks.extend(message_html(m, conv.source) for m in conv.messages)
    return "\n".join(blocks) + "\n"


def export_filename(title: str, fmt: str) -> str:
    return f"{safe_filename(title)}.{fmt}"


def write_conversation(conv: Conversation, out_dir: Path, fmt: str = "md") -> Path:
    """Write a conversation as <out_dir>/<safe title>.<fmt> and return the path."""
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt!r} (expected one of {', '.join(EXPORT_FORMATS)})")

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(conv.title, fmt)
    body = build_markdown(conv) if fmt == "md" else build_html(conv)
    path.write_text(body, encoding="utf-8")
    logger.info(f"Exported {conv.id} -> {path}")
    return path
