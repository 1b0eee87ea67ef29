"""Conversation assembly: message turns (role + HTML) -> stored Conversation record"""

from typing import Iterable, Optional

from loguru import logger

from chatsaver.core.extract.extract import extract_message
from chatsaver.core.models import Capture, Conversation, Message, Role
from chatsaver.core.utils.ids import generate_id


DEFAULT_TITLE = "Untitled Chat"
MIN_CONTENT_LENGTH = 2

Turn = tuple[Optional[Role], str]


def _next_role(last: Role | None) -> Role:
    """Alternate roles when the host markup gives no hint; the first unknown turn is the user's."""
    return Role.assistant if last == Role.user else Role.user


def build_messages(turns: Iterable[Turn], include_html: bool = True) -> list[Message]:
    """Extract each turn, skipping near-empty content and consecutive duplicates.

    `index` keeps the turn's position in the input, so skipped turns leave gaps.
    """
    messages: list[Message] = []
    last_role: Role | None = None

    for index, (role, html) in enumerate(turns):
        role = Role(role) if role else _next_role(last_role)
        extracted = extract_message(html, include_html=include_html)

        if len(extracted.content) < MIN_CONTENT_LENGTH:
            continue
        if messages and messages[-1].content == extracted.content:
            continue

        messages.append(Message(
            role=role,
            content=extracted.content,
            content_html=extracted.content_html,
            index=index,
        ))
        last_role = role

    return messages


def build_conversation(
    source: str,
    url: str,
    turns: Iterable[Turn],
    title: str | None = None,
    include_html: bool = True,
    ) -> Conversation | None:
    """Build a record ready for the store, or None when no message survives extraction."""
    messages = build_messages(turns, include_html=include_html)
    if not messages:
        logger.info(f"No messages extracted from {url}")
        return None

    users = sum(1 for m in messages if m.role == Role.user)
    logger.info(f"Extracted {len(messages)} messages from {source} (user: {users}, assistant: {len(messages) - users})")
    return Conversation(
        id=generate_id(source, url),
        source=source,
        title=title or DEFAULT_TITLE,
        url=url,
        messages=messages,
    )


def conversation_from_capture(capture: Capture, include_html: bool = True) -> Conversation | None:
    """build_conversation() over a validated capture document."""
    return build_conversation(
        capture.source,
        capture.url,
        [(turn.role, turn.html) for turn in capture.messages],
        title=capture.title,
        include_html=include_html,
    )
