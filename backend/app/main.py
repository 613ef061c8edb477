"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError

from app.api.v1.router import api_v1_router
from app.core.config import settings
from app.core.database import close_db, init_db
from app.core.redis import close_redis_compat, init_redis_compat

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle."""
    logger.info("Starting %s ...", settings.PROJECT_NAME)

    # Startup
    await init_db()
    logger.info("Database initialized")

    try:
        await init_redis_compat(app.state)
        logger.info("Redis connected")
    except (RedisError, OSError) as exc:
        app.state.redis = None
        logger.warning("Redis unavailable, regenerate requests run unlocked: %s", exc)

    app.state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.IM_BRIDGE_TIMEOUT_SECONDS)
    )
    logger.info("IM bridge client ready")

    yield

    # Shutdown
    await app.state.http_client.aclose()
    logger.info("IM bridge client closed")

    await close_redis_compat(app.state)
    logger.info("Redis disconnected")

    await close_db()
    logger.info("Database disconnected")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-API-Key", "X-Session-User", "Accept"],
)

# Register API v1 router
app.include_router(api_v1_router, prefix="/api/v1")
