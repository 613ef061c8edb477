"""Message repository: CRUD over messages keyed by ``owner/name``.

Each write is committed on its own. A failure reported after a write
therefore never undoes that write.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.ids import split_id
from app.models.message import Message
from app.services.errors import RepositoryError, ValidationError

logger = logging.getLogger(__name__)

# Columns copied by update(); the key columns are never rewritten.
_UPDATABLE_FIELDS = (
    "created_time",
    "organization",
    "user",
    "chat",
    "reply_to",
    "author",
    "text",
    "error_text",
    "file_name",
    "vector_scores",
    "need_notify",
)


class MessageRepository:
    """Reads and writes Message rows through an AsyncSession."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, message_id: str) -> Message | None:
        try:
            owner, name = split_id(message_id)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        result = await self._execute(
            select(Message).where(Message.owner == owner, Message.name == name)
        )
        return result.scalar_one_or_none()

    async def list_for_chat(self, chat: str) -> list[Message]:
        """All messages of a chat, oldest first."""
        result = await self._execute(
            select(Message)
            .where(Message.chat == chat)
            .order_by(Message.created_time.asc(), Message.name.asc())
        )
        return list(result.scalars().all())

    async def list_for_user(self, owner: str, user: str = "") -> list[Message]:
        """Messages of ``owner``, limited to ``user`` unless it is empty."""
        query = select(Message).where(Message.owner == owner)
        if user:
            query = query.where(Message.user == user)
        result = await self._execute(query.order_by(Message.created_time.desc()))
        return list(result.scalars().all())

    async def list_global(self) -> list[Message]:
        result = await self._execute(
            select(Message).order_by(Message.owner.asc(), Message.created_time.desc())
        )
        return list(result.scalars().all())

    async def create(self, message: Message) -> bool:
        self.db.add(message)
        await self._commit(f"add message {message.owner}/{message.name}")
        return True

    async def update(self, message_id: str, message: Message) -> bool:
        """Overwrite the stored message. Returns False when it does not exist."""
        existing = await self.get(message_id)
        if existing is None:
            return False
        for field in _UPDATABLE_FIELDS:
            setattr(existing, field, getattr(message, field))
        await self._commit(f"update message {message_id}")
        return True

    async def delete(self, message: Message | None) -> bool:
        """Hard delete. A missing target is a no-op that returns False."""
        if message is None:
            return False
        existing = await self.get(f"{message.owner}/{message.name}")
        if existing is None:
            return False
        await self.db.delete(existing)
        await self._commit(f"delete message {existing.owner}/{existing.name}")
        return True

    async def _execute(self, statement):
        try:
            return await self.db.execute(statement)
        except SQLAlchemyError as exc:
            logger.error("Message query failed: %s", exc)
            raise RepositoryError(str(exc)) from exc

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Failed to %s: %s", action, exc)
            raise RepositoryError(f"Failed to {action}: {exc}") from exc
