"""Chat repository: lookup and creation of chats keyed by ``owner/name``."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.ids import current_time, random_name, split_id
from app.models.chat import CHAT_TYPE_AI, Chat
from app.services.errors import RepositoryError, ValidationError

logger = logging.getLogger(__name__)

INITIAL_CHAT_CATEGORY = "Default Category"
INITIAL_CHAT_DISPLAY_NAME = "New Chat"


class ChatRepository:
    """Reads and writes Chat rows through an AsyncSession."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, chat_id: str) -> Chat | None:
        try:
            owner, name = split_id(chat_id)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        try:
            result = await self.db.execute(
                select(Chat).where(Chat.owner == owner, Chat.name == name)
            )
        except SQLAlchemyError as exc:
            logger.error("Chat query failed: %s", exc)
            raise RepositoryError(str(exc)) from exc
        return result.scalar_one_or_none()

    async def list_for_user(self, owner: str, user: str = "") -> list[Chat]:
        query = select(Chat).where(Chat.owner == owner)
        if user:
            query = query.where(Chat.user == user)
        try:
            result = await self.db.execute(query.order_by(Chat.created_time.desc()))
        except SQLAlchemyError as exc:
            logger.error("Chat query failed: %s", exc)
            raise RepositoryError(str(exc)) from exc
        return list(result.scalars().all())

    async def create(self, chat: Chat) -> bool:
        self.db.add(chat)
        await self._commit(f"add chat {chat.owner}/{chat.name}")
        return True

    async def create_initial(self, organization: str, user: str) -> Chat:
        """Create the chat a message lands in when the caller supplied none."""
        now = current_time()
        chat = Chat(
            owner=settings.DEFAULT_OWNER,
            name=f"chat_{random_name()}",
            created_time=now,
            updated_time=now,
            organization=organization,
            display_name=INITIAL_CHAT_DISPLAY_NAME,
            category=INITIAL_CHAT_CATEGORY,
            type=CHAT_TYPE_AI,
            user=user,
            message_count=0,
        )
        await self.create(chat)
        logger.info("Created initial chat %s for user %s", chat.name, user)
        return chat

    async def delete(self, chat: Chat | None) -> bool:
        if chat is None:
            return False
        await self.db.delete(chat)
        await self._commit(f"delete chat {chat.owner}/{chat.name}")
        return True

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Failed to %s: %s", action, exc)
            raise RepositoryError(f"Failed to {action}: {exc}") from exc
