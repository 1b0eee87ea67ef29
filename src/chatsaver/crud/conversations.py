"""Conversation persistence: merge-on-save, lookup, listing, search, delete, stats"""

from datetime import datetime

from loguru import logger
from sqlmodel import Session, select

from chatsaver.core.models import Conversation
from chatsaver.crud.models import ConversationRecord


def _naive(ts: datetime | None) -> datetime | None:
    """Local naive datetime; the columns are timezone-less."""
    if ts is None or ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


def _message_rows(conv: Conversation) -> list[dict]:
    return [m.model_dump(mode="json", by_alias=True, exclude_none=True) for m in conv.messages]


def save_conversation(session: Session, conv: Conversation) -> ConversationRecord:
    """Insert or merge a conversation by id.

    On merge the original saved_at is kept, messages are replaced wholesale and
    an empty title/url does not overwrite the stored one. updated_at is always
    set to now. Flushes but does not commit; caller controls the transaction.
    """
    now = datetime.now()
    record = session.get(ConversationRecord, conv.id)

    if record:
        record.title = conv.title or record.title
        record.url = conv.url or record.url
        record.messages = _message_rows(conv)
        record.updated_at = now
        status = "updated"
    else:
        record = ConversationRecord(
            id=conv.id,
            source=conv.source,
            title=conv.title,
            url=conv.url,
            messages=_message_rows(conv),
            saved_at=_naive(conv.saved_at) or now,
            updated_at=now,
        )
        status = "created"

    session.add(record)
    session.flush()
    logger.info(f"Conversation {status}: {record.id} ({len(record.messages)} messages)")
    return record


def get_conversation(session: Session, conversation_id: str) -> ConversationRecord | None:
    """Return the record with the given id, or None if not found."""
    return session.get(ConversationRecord, conversation_id)


def get_all_conversations(session: Session) -> list[ConversationRecord]:
    """Return all records, most recently updated first."""
    return list(session.exec(
        select(ConversationRecord).order_by(ConversationRecord.updated_at.desc())
    ).all())


def _matches(record: ConversationRecord, q: str) -> bool:
    if record.title and q in record.title.lower():
        return True
    return any(q in (m.get("content") or "").lower() for m in record.messages or [])


def search_conversations(session: Session, query: str) -> list[ConversationRecord]:
    """Case-insensitive substring search over titles and message content. Blank query returns all."""
    records = get_all_conversations(session)
    q = (query or "").strip().lower()
    if not q:
        return records
    return [r for r in records if _matches(r, q)]


def delete_conversation(session: Session, conversation_id: str) -> bool:
    """Delete by id. Returns False when nothing was stored under that id."""
    record = session.get(ConversationRecord, conversation_id)
    if record is None:
        return False
    session.delete(record)
    session.flush()
    logger.info(f"Conversation deleted: {conversation_id}")
    return True


def get_stats(session: Session) -> dict:
    """Totals across the store: conversations, messages, and conversations per source."""
    records = get_all_conversations(session)
    sources: dict[str, int] = {}
    for r in records:
        sources[r.source] = sources.get(r.source, 0) + 1
    return {
        "totalConversations": len(records),
        "totalMessages": sum(len(r.messages or []) for r in records),
        "sources": sources,
    }
