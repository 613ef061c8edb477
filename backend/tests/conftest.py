"""Pytest configuration with fixtures for async testing."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.identity import IdentityContext
from app.core.ids import current_time, get_id, random_name, split_id
from app.models.chat import Chat
from app.models.message import Message
from app.services.notification_gateway import NotificationGateway


# ---------------------------------------------------------------------------
# Test Data Factories
# ---------------------------------------------------------------------------


class ChatFactory:
    """Factory for creating Chat instances for testing."""

    _counter = 0

    @classmethod
    def create(cls, **overrides: Any) -> Chat:
        cls._counter += 1
        defaults = {
            "owner": "admin",
            "name": f"chat_{cls._counter}",
            "created_time": current_time(),
            "updated_time": current_time(),
            "organization": "org",
            "display_name": f"Chat {cls._counter}",
            "category": "Default Category",
            "type": "AI",
            "user": "alice",
            "message_count": 0,
        }
        return Chat(**{**defaults, **overrides})


class MessageFactory:
    """Factory for creating Message instances with increasing timestamps."""

    _counter = 0

    @classmethod
    def create(cls, **overrides: Any) -> Message:
        cls._counter += 1
        defaults = {
            "owner": "admin",
            "name": f"message_{cls._counter:04d}",
            "created_time": f"2000-01-01T00:{cls._counter // 60:02d}:{cls._counter % 60:02d}.000+00:00",
            "organization": "org",
            "user": "alice",
            "chat": "chat_1",
            "reply_to": "",
            "author": "alice",
            "text": f"Message {cls._counter}",
            "error_text": "",
            "file_name": "",
            "vector_scores": [],
            "need_notify": False,
        }
        return Message(**{**defaults, **overrides})


# ---------------------------------------------------------------------------
# In-memory repositories
# ---------------------------------------------------------------------------


class InMemoryMessageRepository:
    """Message repository fake keeping rows in a dict keyed by id."""

    def __init__(self) -> None:
        self.rows: dict[str, Message] = {}
        self.fail_create_for_author: str | None = None

    async def get(self, message_id: str) -> Message | None:
        split_id(message_id)
        return self.rows.get(message_id)

    async def list_for_chat(self, chat: str) -> list[Message]:
        return sorted(
            (m for m in self.rows.values() if m.chat == chat),
            key=lambda m: (m.created_time, m.name),
        )

    async def list_for_user(self, owner: str, user: str = "") -> list[Message]:
        return [
            m for m in self.rows.values()
            if m.owner == owner and (not user or m.user == user)
        ]

    async def list_global(self) -> list[Message]:
        return list(self.rows.values())

    async def create(self, message: Message) -> bool:
        from app.services.errors import RepositoryError

        if self.fail_create_for_author is not None and message.author == self.fail_create_for_author:
            raise RepositoryError("insert failed")
        self.rows[get_id(message.owner, message.name)] = message
        return True

    async def update(self, message_id: str, message: Message) -> bool:
        if message_id not in self.rows:
            return False
        self.rows[message_id] = message
        return True

    async def delete(self, message: Message | None) -> bool:
        if message is None:
            return False
        return self.rows.pop(get_id(message.owner, message.name), None) is not None


class InMemoryChatRepository:
    """Chat repository fake keeping rows in a dict keyed by id."""

    def __init__(self) -> None:
        self.rows: dict[str, Chat] = {}

    def add(self, chat: Chat) -> Chat:
        self.rows[get_id(chat.owner, chat.name)] = chat
        return chat

    async def get(self, chat_id: str) -> Chat | None:
        split_id(chat_id)
        return self.rows.get(chat_id)

    async def list_for_user(self, owner: str, user: str = "") -> list[Chat]:
        return [
            c for c in self.rows.values()
            if c.owner == owner and (not user or c.user == user)
        ]

    async def create(self, chat: Chat) -> bool:
        self.add(chat)
        return True

    async def create_initial(self, organization: str, user: str) -> Chat:
        return self.add(ChatFactory.create(
            name=f"chat_{random_name()}",
            organization=organization,
            user=user,
            type="AI",
        ))

    async def delete(self, chat: Chat | None) -> bool:
        if chat is None:
            return False
        return self.rows.pop(get_id(chat.owner, chat.name), None) is not None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def chat_factory():
    """Provide ChatFactory for tests."""
    ChatFactory._counter = 0
    return ChatFactory


@pytest.fixture
def message_factory():
    """Provide MessageFactory for tests."""
    MessageFactory._counter = 0
    return MessageFactory


@pytest.fixture
def message_repo():
    return InMemoryMessageRepository()


@pytest.fixture
def chat_repo():
    return InMemoryChatRepository()


@pytest.fixture
def mock_gateway():
    """Provide a NotificationGateway double whose sends succeed."""
    gateway = AsyncMock(spec=NotificationGateway)
    gateway.send_email = AsyncMock()
    gateway.send_to_chat = AsyncMock()
    return gateway


@pytest.fixture
def mock_db():
    """Provide a mock AsyncSession for unit tests."""
    session = AsyncMock(spec=AsyncSession)
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    return session


@pytest.fixture
def admin_identity():
    return IdentityContext(caller_identity="admin", is_admin=True)


@pytest.fixture
def alice_identity():
    return IdentityContext(caller_identity="alice", client_address="10.0.0.1", client_agent="Firefox")


@pytest.fixture
def anonymous_identity():
    return IdentityContext(client_address="203.0.113.7", client_agent="Mozilla/5.0 widget")
