"""Initial schema: chats and messages.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the chats and messages tables."""
    # --- chats ---
    op.create_table(
        "chats",
        sa.Column("owner", sa.String(100), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("created_time", sa.String(100), server_default="", nullable=False),
        sa.Column("updated_time", sa.String(100), server_default="", nullable=False),
        sa.Column("organization", sa.String(100), server_default="", nullable=False),
        sa.Column("display_name", sa.String(100), server_default="", nullable=False),
        sa.Column("category", sa.String(100), server_default="", nullable=False),
        sa.Column("type", sa.String(100), server_default="", nullable=False, comment="AI, Signal, or plain"),
        sa.Column("user", sa.String(100), server_default="", nullable=False),
        sa.Column("message_count", sa.Integer(), server_default="0", nullable=False),
        sa.PrimaryKeyConstraint("owner", "name"),
    )
    op.create_index("ix_chats_user", "chats", ["user"])

    # --- messages ---
    op.create_table(
        "messages",
        sa.Column("owner", sa.String(100), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("created_time", sa.String(100), nullable=False, comment="ISO-8601 UTC with milliseconds"),
        sa.Column("organization", sa.String(100), server_default="", nullable=False),
        sa.Column("user", sa.String(100), server_default="", nullable=False),
        sa.Column("chat", sa.String(100), server_default="", nullable=False),
        sa.Column("reply_to", sa.String(100), server_default="", nullable=False),
        sa.Column("author", sa.String(100), server_default="", nullable=False, comment="User id or AI"),
        sa.Column("text", sa.Text(), server_default="", nullable=False),
        sa.Column("error_text", sa.Text(), server_default="", nullable=False),
        sa.Column("file_name", sa.String(100), server_default="", nullable=False),
        sa.Column("vector_scores", postgresql.JSONB(), nullable=True, comment="Ordered list of {vector, score}"),
        sa.Column("need_notify", sa.Boolean(), server_default="false", nullable=False),
        sa.PrimaryKeyConstraint("owner", "name"),
    )
    op.create_index("ix_messages_created_time", "messages", ["created_time"])
    op.create_index("ix_messages_user", "messages", ["user"])
    op.create_index("ix_messages_chat", "messages", ["chat"])


def downgrade() -> None:
    """Drop the chats and messages tables."""
    op.drop_index("ix_messages_chat", table_name="messages")
    op.drop_index("ix_messages_user", table_name="messages")
    op.drop_index("ix_messages_created_time", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_chats_user", table_name="chats")
    op.drop_table("chats")
