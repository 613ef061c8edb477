"""API v1 router aggregating all sub-routers."""

from fastapi import APIRouter

from app.api.v1.chats import router as chats_router
from app.api.v1.messages import router as messages_router

api_v1_router = APIRouter()


@api_v1_router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint returning 200 OK."""
    return {"status": "ok"}


# Identity is resolved per endpoint; anonymous widget callers are allowed.
api_v1_router.include_router(chats_router)
api_v1_router.include_router(messages_router)
