"""Database table definition for saved conversation records"""

from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import JSON, Column, DateTime, Text
from sqlmodel import Field, SQLModel

from chatsaver.core.models import Conversation


class ConversationRecord(SQLModel, table=True):
    """One saved conversation; messages are stored verbatim as a JSON array"""
    __tablename__ = "conversations"
    id: str = Field(primary_key=True)
    source: str = Field(..., index=True, nullable=False)
    title: str = Field(default="", sa_column=Column(Text, nullable=False))
    url: str = Field(default="", sa_column=Column(Text, nullable=False))
    messages: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    saved_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))

    def to_conversation(self) -> Conversation:
        return Conversation(
            id=self.id,
            source=self.source,
            title=self.title,
            url=self.url,
            messages=self.messages,
            saved_at=self.saved_at,
            updated_at=self.updated_at,
        )
