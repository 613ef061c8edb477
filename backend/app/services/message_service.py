"""Message service: the operations exposed over chat messages.

Provides:
- Global, per-user and per-chat message listing with self-or-admin rules
- Message update with optional email notification
- Message creation: regenerate pre-step, chat resolution, store, dispatch
- Admin deletion and the guarded welcome-message deletion
"""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from app.core.config import settings
from app.core.identity import IdentityContext
from app.core.ids import current_time, get_id, random_name, split_id
from app.core.locks import chat_mutex
from app.models.chat import Chat
from app.models.message import Message
from app.repositories.chat_repository import ChatRepository
from app.repositories.message_repository import MessageRepository
from app.schemas.message import MessagePayload
from app.services.access_guard import NO_PERMISSION, AccessGuard
from app.services.errors import NotFoundError, UnauthorizedError, ValidationError
from app.services.message_dispatcher import DispatchResult, MessageDispatcher
from app.services.notification_gateway import NotificationGateway
from app.services.regeneration import RegenerationCoordinator

logger = logging.getLogger(__name__)

ChatLockFactory = Callable[[str], AbstractAsyncContextManager[None]]


def message_from_payload(payload: MessagePayload) -> Message:
    """Build a Message row from a request body, dropping transient flags."""
    return Message(
        owner=payload.owner,
        name=payload.name,
        created_time=payload.created_time,
        organization=payload.organization,
        user=payload.user,
        chat=payload.chat,
        reply_to=payload.reply_to,
        author=payload.author,
        text=payload.text,
        error_text=payload.error_text,
        file_name=payload.file_name,
        vector_scores=[score.model_dump() for score in payload.vector_scores],
        need_notify=payload.need_notify,
    )


class MessageService:
    """Orchestrates message operations over the repositories and dispatcher."""

    def __init__(
        self,
        chats: ChatRepository,
        messages: MessageRepository,
        gateway: NotificationGateway,
        guard: AccessGuard | None = None,
        lock_factory: ChatLockFactory | None = None,
    ) -> None:
        self._chats = chats
        self._messages = messages
        self._gateway = gateway
        self._guard = guard or AccessGuard()
        self._lock = lock_factory or chat_mutex
        self._dispatcher = MessageDispatcher(chats, messages, gateway)
        self._regeneration = RegenerationCoordinator(messages)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------

    async def list_global_messages(self) -> list[Message]:
        return await self._messages.list_global()

    async def list_messages(
        self,
        identity: IdentityContext,
        user: str = "",
        chat: str = "",
        selected_user: str = "",
    ) -> list[Message]:
        """List messages of one user, or of one chat when ``chat`` is given.

        Admins see everyone, or ``selected_user`` when given. Everyone else
        only sees messages attributed to their own identity.
        """
        if selected_user == "null":
            selected_user = ""

        if identity.is_admin:
            user = selected_user
        else:
            own = identity.effective_user
            if selected_user and selected_user != own:
                raise UnauthorizedError("You can only view your own messages")
            if user and user != own:
                raise UnauthorizedError("You can only view your own messages")
            user = own

        if not chat:
            return await self._messages.list_for_user(settings.DEFAULT_OWNER, user)

        messages = await self._messages.list_for_chat(chat)
        if user:
            messages = [m for m in messages if m.user == user]
        return messages

    async def get_message(self, message_id: str) -> Message:
        message = await self._messages.get(message_id)
        if message is None:
            raise NotFoundError(f"message:The message: {message_id} is not found")
        return message

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------

    async def update_message(self, message_id: str, payload: MessagePayload) -> bool:
        """Store ``payload`` over ``message_id``, emailing first when asked to."""
        message = message_from_payload(payload)
        if message.need_notify:
            await self._gateway.send_email(message)
            message.need_notify = False
        return await self._messages.update(message_id, message)

    async def add_message(self, payload: MessagePayload) -> DispatchResult:
        """Store a new message and dispatch it. Returns the dispatch outcome."""
        if payload.is_regenerated:
            async with self._lock(get_id(payload.owner, payload.chat)):
                await self._regeneration.prepare_regenerate(payload.chat)
                return await self._store_and_dispatch(payload)
        return await self._store_and_dispatch(payload)

    async def delete_message(self, identity: IdentityContext, payload: MessagePayload) -> bool:
        self._guard.require_admin(identity)
        return await self._messages.delete(message_from_payload(payload))

    async def delete_welcome_message(
        self, identity: IdentityContext, payload: MessagePayload
    ) -> bool:
        """Delete the AI welcome message shown to the caller.

        A missing message is denied like a foreign one so the answer does not
        reveal which names exist.
        """
        message = await self._messages.get(get_id(payload.owner, payload.name))
        if message is None:
            raise UnauthorizedError(NO_PERMISSION)
        self._guard.require_welcome_delete(identity, message)
        return await self._messages.delete(message)

    # -------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------

    async def _resolve_chat(self, message: Message) -> Chat:
        if message.chat == "":
            chat = await self._chats.create_initial(message.organization, message.user)
            message.organization = chat.organization
            message.chat = chat.name
            return chat

        chat_id = get_id(message.owner, message.chat)
        chat = await self._chats.get(chat_id)
        if chat is None:
            raise NotFoundError(f"chat:The chat: {chat_id} is not found")
        return chat

    async def _store_and_dispatch(self, payload: MessagePayload) -> DispatchResult:
        message = message_from_payload(payload)
        if not message.owner:
            raise ValidationError("message owner must not be empty")
        if not message.name:
            message.name = f"message_{random_name()}"
        else:
            try:
                split_id(get_id(message.owner, message.name))
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc

        chat = await self._resolve_chat(message)
        message.created_time = current_time()

        success = await self._messages.create(message)
        if not success:
            return DispatchResult(chat=chat)
        return await self._dispatcher.dispatch(message)
