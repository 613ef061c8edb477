"""Async repositories over chats and messages."""

from app.repositories.chat_repository import ChatRepository
from app.repositories.message_repository import MessageRepository

__all__ = [
    "ChatRepository",
    "MessageRepository",
]
