"""Regeneration coordinator: undo the latest AI/user exchange of a chat.

Before a regenerated message is stored, the most recent AI reply and the
most recent user message are removed so the exchange can be redone.

Candidate selection, scanning newest to oldest:

1. the last AI message whose ``error_text`` is set (a failed attempt),
2. otherwise the last AI message of any state,
3. independently, the last message not authored by the AI.

A missing candidate is skipped. The deletions are separate writes and are
not atomic with the insert that follows them.
"""

import logging
from dataclasses import dataclass

from app.models.message import Message
from app.repositories.message_repository import MessageRepository

logger = logging.getLogger(__name__)


@dataclass
class RegenerationResult:
    """Messages removed by a regenerate pre-step (either may be None)."""

    ai_message: Message | None = None
    user_message: Message | None = None

    @property
    def deleted_count(self) -> int:
        return sum(m is not None for m in (self.ai_message, self.user_message))


def find_last_ai_message(messages: list[Message]) -> Message | None:
    """Latest failed AI message, falling back to the latest AI message."""
    failed = next(
        (m for m in reversed(messages) if m.is_ai and m.error_text != ""),
        None,
    )
    if failed is not None:
        return failed
    return next((m for m in reversed(messages) if m.is_ai), None)


def find_last_user_message(messages: list[Message]) -> Message | None:
    return next((m for m in reversed(messages) if not m.is_ai), None)


class RegenerationCoordinator:
    """Removes the last AI/user pair of a chat ahead of a regenerated message."""

    def __init__(self, messages: MessageRepository) -> None:
        self._messages = messages

    async def prepare_regenerate(self, chat: str) -> RegenerationResult:
        history = await self._messages.list_for_chat(chat)
        result = RegenerationResult(
            ai_message=find_last_ai_message(history),
            user_message=find_last_user_message(history),
        )

        await self._messages.delete(result.ai_message)
        await self._messages.delete(result.user_message)

        logger.info(
            "Regenerate in chat %s removed %d message(s): ai=%s user=%s",
            chat,
            result.deleted_count,
            result.ai_message.name if result.ai_message else None,
            result.user_message.name if result.user_message else None,
        )
        return result
