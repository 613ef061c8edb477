"""Chat SQLAlchemy model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base

CHAT_TYPE_AI = "AI"
CHAT_TYPE_SIGNAL = "Signal"


class Chat(Base):
    """A conversation. ``type`` decides how new messages are dispatched."""

    __tablename__ = "chats"

    owner: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    created_time: Mapped[str] = mapped_column(String(100), nullable=False, server_default="")
    updated_time: Mapped[str] = mapped_column(String(100), nullable=False, server_default="")
    organization: Mapped[str] = mapped_column(String(100), nullable=False, server_default="")
    display_name: Mapped[str] = mapped_column(String(100), nullable=False, server_default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False, server_default="")
    type: Mapped[str] = mapped_column(
        String(100), nullable=False, server_default="", comment="AI, Signal, or plain"
    )
    user: Mapped[str] = mapped_column(String(100), nullable=False, index=True, server_default="")
    message_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    @property
    def id(self) -> str:
        return f"{self.owner}/{self.name}"
