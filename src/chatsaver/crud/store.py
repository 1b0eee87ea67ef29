"""Conversation store interface with SQL-backed and in-memory implementations"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from sqlmodel import Session

from chatsaver.core.models import Conversation
from chatsaver.crud import conversations as crud


class ConversationStore(ABC):
    """Key-value store of conversation records keyed by id."""

    @abstractmethod
    def put(self, conv: Conversation) -> Conversation:
        """Insert or merge; return the stored record."""
        raise NotImplementedError

    @abstractmethod
    def get(self, conversation_id: str) -> Conversation | None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, conversation_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list(self) -> list[Conversation]:
        """All records, most recently updated first."""
        raise NotImplementedError

    @abstractmethod
    def search(self, query: str) -> list[Conversation]:
        raise NotImplementedError

    @abstractmethod
    def stats(self) -> dict:
        raise NotImplementedError


class SQLConversationStore(ConversationStore):
    """Store backed by the conversations table; one session and commit per call."""

    def __init__(self, engine):
        self.engine = engine

    def put(self, conv: Conversation) -> Conversation:
        with Session(self.engine) as session:
            saved = crud.save_conversation(session, conv).to_conversation()
            session.commit()
        return saved

    def get(self, conversation_id: str) -> Conversation | None:
        with Session(self.engine) as session:
            record = crud.get_conversation(session, conversation_id)
            return record.to_conversation() if record else None

    def delete(self, conversation_id: str) -> bool:
        with Session(self.engine) as session:
            deleted = crud.delete_conversation(session, conversation_id)
            session.commit()
        return deleted

    def list(self) -> list[Conversation]:
        with Session(self.engine) as session:
            return [r.to_conversation() for r in crud.get_all_conversations(session)]

    def search(self, query: str) -> list[Conversation]:
        with Session(self.engine) as session:
            return [r.to_conversation() for r in crud.search_conversations(session, query)]

    def stats(self) -> dict:
        with Session(self.engine) as session:
            return crud.get_stats(session)


@dataclass
class MemoryConversationStore(ConversationStore):
    """Dict-backed store with the same merge and ordering rules as the SQL store."""
    _records: dict[str, Conversation] = field(default_factory=dict)

    def put(self, conv: Conversation) -> Conversation:
        now = datetime.now()
        existing = self._records.get(conv.id)
        if existing:
            saved = existing.model_copy(deep=True, update={
                "title": conv.title or existing.title,
                "url": conv.url or existing.url,
                "messages": [m.model_copy(deep=True) for m in conv.messages],
                "updated_at": now,
            })
        else:
            saved = conv.model_copy(deep=True, update={
                "saved_at": conv.saved_at or now,
                "updated_at": now,
            })
        # latest put goes last in dict order; list() breaks updated_at ties with it
        self._records.pop(conv.id, None)
        self._records[conv.id] = saved
        return saved.model_copy(deep=True)

    def get(self, conversation_id: str) -> Conversation | None:
        conv = self._records.get(conversation_id)
        return conv.model_copy(deep=True) if conv else None

    def delete(self, conversation_id: str) -> bool:
        return self._records.pop(conversation_id, None) is not None

    def list(self) -> list[Conversation]:
        ranked = sorted(
            enumerate(self._records.values()),
            key=lambda pair: (pair[1].updated_at or datetime.min, pair[0]),
            reverse=True,
        )
        return [c.model_copy(deep=True) for _, c in ranked]

    def search(self, query: str) -> list[Conversation]:
        q = (query or "").strip().lower()
        records = self.list()
        if not q:
            return records
        return [
            c for c in records
            if q in (c.title or "").lower() or any(q in m.content.lower() for m in c.messages)
        ]

    def stats(self) -> dict:
        sources: dict[str, int] = {}
        for c in self._records.values():
            sources[c.source] = sources.get(c.source, 0) + 1
        return {
            "totalConversations": len(self._records),
            "totalMessages": sum(len(c.messages) for c in self._records.values()),
            "sources": sources,
        }
