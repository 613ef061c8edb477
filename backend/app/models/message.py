"""Message SQLAlchemy model."""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base

AUTHOR_AI = "AI"
REPLY_TO_WELCOME = "Welcome"


class Message(Base):
    """A single chat message, authored by a user or by the AI."""

    __tablename__ = "messages"

    owner: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    created_time: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True, comment="ISO-8601 UTC with milliseconds"
    )
    organization: Mapped[str] = mapped_column(String(100), nullable=False, server_default="")
    user: Mapped[str] = mapped_column(String(100), nullable=False, index=True, server_default="")
    chat: Mapped[str] = mapped_column(String(100), nullable=False, index=True, server_default="")
    reply_to: Mapped[str] = mapped_column(String(100), nullable=False, server_default="")
    author: Mapped[str] = mapped_column(
        String(100), nullable=False, server_default="", comment="User id or AI"
    )
    text: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    error_text: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    file_name: Mapped[str] = mapped_column(String(100), nullable=False, server_default="")
    vector_scores: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Ordered list of {vector, score}"
    )
    need_notify: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")

    @property
    def id(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def is_ai(self) -> bool:
        return self.author == AUTHOR_AI
