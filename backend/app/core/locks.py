"""Per-chat mutual exclusion for the regenerate flow.

Regenerating deletes the last AI/user pair and then inserts the new message
in separate writes. Two concurrent regenerate requests on the same chat can
interleave there. When enabled, a Redis lock serialises them per chat. When
Redis is not connected, or fails while taking the lock, the section runs
unguarded and a warning is logged.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from redis.exceptions import LockError, RedisError

from app.core.config import settings
from app.core.redis import get_redis
from app.services.errors import ConflictError

logger = logging.getLogger(__name__)

LOCK_KEY_PREFIX = "lock:regenerate"


@asynccontextmanager
async def chat_mutex(chat_id: str) -> AsyncIterator[None]:
    """Hold the regenerate lock of ``chat_id`` for the duration of the block."""
    if not settings.REGENERATE_LOCK_ENABLED:
        yield
        return

    try:
        redis = get_redis()
    except RuntimeError:
        logger.warning("Redis unavailable, regenerating chat %s without a lock", chat_id)
        yield
        return

    lock = redis.lock(
        f"{LOCK_KEY_PREFIX}:{chat_id}",
        timeout=settings.REGENERATE_LOCK_TIMEOUT_SECONDS,
        blocking_timeout=settings.REGENERATE_LOCK_WAIT_SECONDS,
    )
    try:
        acquired = await lock.acquire()
    except RedisError as exc:
        logger.warning("Redis lock unavailable, regenerating chat %s without a lock: %s", chat_id, exc)
        acquired = None
    if acquired is None:
        yield
        return
    if not acquired:
        raise ConflictError(f"The chat: {chat_id} is already being regenerated")

    try:
        yield
    finally:
        try:
            await lock.release()
        except LockError:
            logger.warning("Regenerate lock for chat %s expired before release", chat_id)
        except RedisError as exc:
            logger.warning("Failed to release regenerate lock for chat %s: %s", chat_id, exc)
