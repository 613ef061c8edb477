"""Message dispatcher: side effects of a newly stored message.

Runs once per stored message, and only after the store reported success.
What happens depends on the type of the chat the message belongs to:

- ``AI``: an empty AI placeholder reply is stored for a later generation
  step to fill in. Failing to store it is reported as DispatchFailure but
  the user message stays.
- ``Signal``: the message is forwarded to the IM bridge. Bridge failures are
  logged and recorded on the result, never raised.
- anything else: nothing.
"""

import logging
from dataclasses import dataclass

from app.core.ids import get_id, random_name, time_after
from app.models.chat import CHAT_TYPE_AI, CHAT_TYPE_SIGNAL, Chat
from app.models.message import AUTHOR_AI, Message
from app.repositories.chat_repository import ChatRepository
from app.repositories.message_repository import MessageRepository
from app.schemas.message import IMEnvelope, MessageResponse
from app.services.errors import ChatServiceError, DispatchFailure, NotFoundError
from app.services.notification_gateway import NotificationGateway

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Outcome of dispatching one stored message."""

    chat: Chat
    placeholder: Message | None = None
    bridge_error: str | None = None

    @property
    def created_placeholder(self) -> bool:
        return self.placeholder is not None


def build_placeholder(message: Message) -> Message:
    """The empty AI reply slot answering ``message``."""
    return Message(
        owner=message.owner,
        name=f"message_{random_name()}",
        created_time=time_after(message.created_time),
        organization=message.organization,
        user=message.user,
        chat=message.chat,
        reply_to=message.name,
        author=AUTHOR_AI,
        text="",
        error_text="",
        file_name=message.file_name,
        vector_scores=[],
        need_notify=False,
    )


class MessageDispatcher:
    """Decides and performs the follow-up of a stored user message."""

    def __init__(
        self,
        chats: ChatRepository,
        messages: MessageRepository,
        gateway: NotificationGateway,
    ) -> None:
        self._chats = chats
        self._messages = messages
        self._gateway = gateway

    async def dispatch(self, message: Message) -> DispatchResult:
        chat_id = get_id(message.owner, message.chat)
        chat = await self._chats.get(chat_id)
        if chat is None:
            raise NotFoundError(f"chat:The chat: {chat_id} is not found")

        result = DispatchResult(chat=chat)
        if chat.type == CHAT_TYPE_AI:
            result.placeholder = await self._add_placeholder(message)
        elif chat.type == CHAT_TYPE_SIGNAL:
            result.bridge_error = await self._forward_to_bridge(chat, message)
        return result

    async def _add_placeholder(self, message: Message) -> Message:
        placeholder = build_placeholder(message)
        try:
            await self._messages.create(placeholder)
        except ChatServiceError as exc:
            raise DispatchFailure(
                f"Failed to add AI reply for message {message.name}: {exc}"
            ) from exc
        logger.info(
            "Added AI placeholder %s replying to %s in chat %s",
            placeholder.name, message.name, message.chat,
        )
        return placeholder

    async def _forward_to_bridge(self, chat: Chat, message: Message) -> str | None:
        envelope = IMEnvelope(body=MessageResponse.model_validate(message))
        payload = envelope.model_dump_json(by_alias=True)
        try:
            await self._gateway.send_to_chat(chat, payload)
        except DispatchFailure as exc:
            logger.warning("IM bridge delivery for chat %s failed: %s", chat.id, exc)
            return str(exc)
        return None
