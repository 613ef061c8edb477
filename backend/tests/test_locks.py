"""Tests for the per-chat regenerate mutex."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import LockNotOwnedError

from app.core.config import settings
from app.core.locks import LOCK_KEY_PREFIX, chat_mutex
from app.services.errors import ConflictError


def _redis_with_lock(acquired: bool) -> tuple[MagicMock, MagicMock]:
    lock = MagicMock()
    lock.acquire = AsyncMock(return_value=acquired)
    lock.release = AsyncMock()
    redis = MagicMock()
    redis.lock.return_value = lock
    return redis, lock


class TestChatMutex:
    """Test chat_mutex with and without Redis."""

    @pytest.mark.asyncio
    async def test_disabled_runs_without_redis(self):
        with patch.object(settings, "REGENERATE_LOCK_ENABLED", False), \
                patch("app.core.locks.get_redis") as get_redis:
            async with chat_mutex("admin/c1"):
                pass
        get_redis.assert_not_called()

    @pytest.mark.asyncio
    async def test_redis_unavailable_runs_unguarded(self):
        with patch("app.core.locks.get_redis", side_effect=RuntimeError("not initialized")):
            entered = False
            async with chat_mutex("admin/c1"):
                entered = True
        assert entered

    @pytest.mark.asyncio
    async def test_lock_acquired_and_released(self):
        redis, lock = _redis_with_lock(acquired=True)
        with patch("app.core.locks.get_redis", return_value=redis):
            async with chat_mutex("admin/c1"):
                lock.release.assert_not_awaited()

        assert redis.lock.call_args.args[0] == f"{LOCK_KEY_PREFIX}:admin/c1"
        lock.acquire.assert_awaited_once()
        lock.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_lock_released_when_block_fails(self):
        redis, lock = _redis_with_lock(acquired=True)
        with patch("app.core.locks.get_redis", return_value=redis):
            with pytest.raises(ValueError):
                async with chat_mutex("admin/c1"):
                    raise ValueError("boom")
        lock.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_busy_lock_raises_conflict(self):
        redis, lock = _redis_with_lock(acquired=False)
        with patch("app.core.locks.get_redis", return_value=redis):
            with pytest.raises(ConflictError, match="already being regenerated"):
                async with chat_mutex("admin/c1"):
                    pass
        lock.release.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_lock_release_is_tolerated(self):
        redis, lock = _redis_with_lock(acquired=True)
        lock.release.side_effect = LockNotOwnedError("expired")
        with patch("app.core.locks.get_redis", return_value=redis):
            async with chat_mutex("admin/c1"):
                pass

    @pytest.mark.asyncio
    async def test_redis_failure_on_acquire_runs_unguarded(self):
        redis, lock = _redis_with_lock(acquired=True)
        lock.acquire.side_effect = RedisConnectionError("Connection refused")
        with patch("app.core.locks.get_redis", return_value=redis):
            entered = False
            async with chat_mutex("admin/c1"):
                entered = True
        assert entered
        lock.release.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_redis_failure_on_release_is_tolerated(self):
        redis, lock = _redis_with_lock(acquired=True)
        lock.release.side_effect = RedisConnectionError("Connection reset")
        with patch("app.core.locks.get_redis", return_value=redis):
            async with chat_mutex("admin/c1"):
                pass
        lock.release.assert_awaited_once()
