"""Message API endpoints: list, get, add, update and delete messages."""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import http_error
from app.core.database import get_db
from app.core.identity import IdentityContext, get_identity
from app.core.ids import get_id
from app.models.chat import Chat
from app.models.message import Message
from app.repositories.chat_repository import ChatRepository
from app.repositories.message_repository import MessageRepository
from app.schemas.chat import ChatResponse
from app.schemas.message import MessagePayload, MessageResponse
from app.services.errors import ChatServiceError
from app.services.message_service import MessageService
from app.services.notification_gateway import NotificationGateway

router = APIRouter(prefix="/messages", tags=["messages"])


def get_notification_gateway(request: Request) -> NotificationGateway:
    """Dependency returning a gateway bound to the shared HTTP client."""
    return NotificationGateway(http_client=getattr(request.app.state, "http_client", None))


def _get_message_service(
    db: AsyncSession = Depends(get_db),
    gateway: NotificationGateway = Depends(get_notification_gateway),
) -> MessageService:
    """Dependency to construct a MessageService with its collaborators."""
    return MessageService(
        chats=ChatRepository(db),
        messages=MessageRepository(db),
        gateway=gateway,
    )


@router.get("/global", response_model=list[MessageResponse])
async def list_global_messages(
    svc: MessageService = Depends(_get_message_service),
) -> list[Message]:
    """List every stored message, grouped by owner, newest first."""
    try:
        return await svc.list_global_messages()
    except ChatServiceError as exc:
        raise http_error(exc)


@router.get("", response_model=list[MessageResponse])
async def list_messages(
    user: str = Query(""),
    chat: str = Query(""),
    selected_user: str = Query("", alias="selectedUser"),
    identity: IdentityContext = Depends(get_identity),
    svc: MessageService = Depends(_get_message_service),
) -> list[Message]:
    """List the caller's messages, or one chat's messages when ``chat`` is set."""
    try:
        return await svc.list_messages(
            identity, user=user, chat=chat, selected_user=selected_user
        )
    except ChatServiceError as exc:
        raise http_error(exc)


@router.get("/{owner}/{name}", response_model=MessageResponse)
async def get_message(
    owner: str,
    name: str,
    svc: MessageService = Depends(_get_message_service),
) -> Message:
    """Get a single message by owner and name."""
    try:
        return await svc.get_message(get_id(owner, name))
    except ChatServiceError as exc:
        raise http_error(exc)


@router.put("/{owner}/{name}", response_model=bool)
async def update_message(
    owner: str,
    name: str,
    payload: MessagePayload,
    svc: MessageService = Depends(_get_message_service),
) -> bool:
    """Overwrite a message, sending its email notification first if requested."""
    try:
        return await svc.update_message(get_id(owner, name), payload)
    except ChatServiceError as exc:
        raise http_error(exc)


@router.post("", response_model=ChatResponse)
async def add_message(
    payload: MessagePayload,
    svc: MessageService = Depends(_get_message_service),
) -> Chat:
    """Add a message and return the chat it was stored in.

    Regenerated messages first remove the chat's last AI/user pair. AI chats
    get an empty AI reply placeholder, Signal chats are forwarded to the IM
    bridge.
    """
    try:
        result = await svc.add_message(payload)
    except ChatServiceError as exc:
        raise http_error(exc)
    return result.chat


@router.delete("/{owner}/{name}", response_model=bool)
async def delete_message(
    owner: str,
    name: str,
    identity: IdentityContext = Depends(get_identity),
    svc: MessageService = Depends(_get_message_service),
) -> bool:
    """Hard delete a message. Admin only."""
    try:
        return await svc.delete_message(identity, MessagePayload(owner=owner, name=name))
    except ChatServiceError as exc:
        raise http_error(exc)


@router.delete("/{owner}/{name}/welcome", response_model=bool)
async def delete_welcome_message(
    owner: str,
    name: str,
    identity: IdentityContext = Depends(get_identity),
    svc: MessageService = Depends(_get_message_service),
) -> bool:
    """Delete the caller's own AI welcome message."""
    try:
        return await svc.delete_welcome_message(identity, MessagePayload(owner=owner, name=name))
    except ChatServiceError as exc:
        raise http_error(exc)
