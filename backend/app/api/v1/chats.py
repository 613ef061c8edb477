"""Chat API endpoints: list, get, create and delete chats."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import http_error
from app.core.config import settings
from app.core.database import get_db
from app.core.identity import IdentityContext, get_identity
from app.core.ids import current_time, get_id, random_name
from app.models.chat import Chat
from app.repositories.chat_repository import ChatRepository
from app.schemas.chat import ChatCreate, ChatResponse
from app.services.access_guard import AccessGuard
from app.services.errors import ChatServiceError, NotFoundError, UnauthorizedError

router = APIRouter(prefix="/chats", tags=["chats"])


def _get_chat_repository(db: AsyncSession = Depends(get_db)) -> ChatRepository:
    """Dependency to construct a ChatRepository."""
    return ChatRepository(db)


@router.get("", response_model=list[ChatResponse])
async def list_chats(
    user: str = Query(""),
    identity: IdentityContext = Depends(get_identity),
    repo: ChatRepository = Depends(_get_chat_repository),
) -> list[Chat]:
    """List chats. Non-admin callers only see their own."""
    if not identity.is_admin:
        own = identity.effective_user
        if user and user != own:
            raise http_error(UnauthorizedError("You can only view your own chats"))
        user = own
    try:
        return await repo.list_for_user(settings.DEFAULT_OWNER, user)
    except ChatServiceError as exc:
        raise http_error(exc)


@router.get("/{owner}/{name}", response_model=ChatResponse)
async def get_chat(
    owner: str,
    name: str,
    repo: ChatRepository = Depends(_get_chat_repository),
) -> Chat:
    """Get a single chat by owner and name."""
    try:
        chat = await repo.get(get_id(owner, name))
    except ChatServiceError as exc:
        raise http_error(exc)
    if chat is None:
        raise http_error(NotFoundError(f"chat:The chat: {get_id(owner, name)} is not found"))
    return chat


@router.post("", response_model=ChatResponse, status_code=status.HTTP_201_CREATED)
async def create_chat(
    payload: ChatCreate,
    repo: ChatRepository = Depends(_get_chat_repository),
) -> Chat:
    """Create a chat. The type decides how its new messages are dispatched."""
    now = current_time()
    chat = Chat(
        owner=payload.owner,
        name=payload.name or f"chat_{random_name()}",
        created_time=now,
        updated_time=now,
        organization=payload.organization,
        display_name=payload.display_name,
        category=payload.category,
        type=payload.type,
        user=payload.user,
        message_count=0,
    )
    try:
        await repo.create(chat)
    except ChatServiceError as exc:
        raise http_error(exc)
    return chat


@router.delete("/{owner}/{name}", response_model=bool)
async def delete_chat(
    owner: str,
    name: str,
    identity: IdentityContext = Depends(get_identity),
    repo: ChatRepository = Depends(_get_chat_repository),
) -> bool:
    """Delete a chat. Admin only."""
    try:
        AccessGuard.require_admin(identity)
        return await repo.delete(await repo.get(get_id(owner, name)))
    except ChatServiceError as exc:
        raise http_error(exc)
