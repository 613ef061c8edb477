"""SQLAlchemy ORM models."""

from app.models.chat import Chat
from app.models.message import Message

__all__ = [
    "Chat",
    "Message",
]
