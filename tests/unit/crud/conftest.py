"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session

from chatsaver.core.models import Conversation, Message, Role
from chatsaver.crud.database import init_db


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created, shared across sessions."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="make_conv")
def make_conv_fixture():
    """Factory for a small conversation record."""
    def _make(
        conv_id: str = "chatgpt_abc123def456",
        title: str = "Test chat",
        contents: tuple = ("hello", "hi there"),
        source: str = "chatgpt",
        url: str = "https://chatgpt.com/c/abc123def456",
        ) -> Conversation:
        roles = [Role.user, Role.assistant]
        return Conversation(
            id=conv_id,
            source=source,
            title=title,
            url=url,
            messages=[
                Message(role=roles[i % 2], content=c, index=i) for i, c in enumerate(contents)
            ],
        )
    return _make
