import json
from unittest.mock import AsyncMock

import pytest

from app.core.cache import CacheService


class TestCacheWithoutRedis:
    """Every operation is a no-op when Redis is not configured."""

    @pytest.mark.asyncio
    async def test_operations_are_no_ops(self):
        cache = CacheService(redis_client=None)
        assert cache.is_available is False
        assert await cache.get("anything") is None
        await cache.set("anything", "value", ttl=10)
        assert await cache.leaderboard_version() == "0"
        assert await cache.get_leaderboard(50, "0") is None
        await cache.set_leaderboard(50, [{"rank": 1}], "0", ttl=10)
        await cache.invalidate_leaderboard()


class TestLeaderboardPages:
    @pytest.mark.asyncio
    async def test_key_includes_version_and_limit(self, mock_cache, mock_redis):
        mock_redis.get = AsyncMock(side_effect=["7", None])
        version = await mock_cache.leaderboard_version()
        assert version == "7"
        assert await mock_cache.get_leaderboard(25, version) is None
        mock_redis.get.assert_any_await("leaderboard:version")
        mock_redis.get.assert_any_await("leaderboard:v7:25")

    @pytest.mark.asyncio
    async def test_set_uses_ttl(self, mock_cache, mock_redis):
        await mock_cache.set_leaderboard(
            10, [{"rank": 1, "driver_id": "d"}], "0", ttl=30
        )
        mock_redis.setex.assert_awaited_once_with(
            "leaderboard:v0:10", 30, json.dumps([{"rank": 1, "driver_id": "d"}])
        )

    @pytest.mark.asyncio
    async def test_set_without_ttl(self, mock_cache, mock_redis):
        await mock_cache.set_leaderboard(10, [], "0", ttl=None)
        mock_redis.set.assert_awaited_once_with("leaderboard:v0:10", "[]")
        mock_redis.setex.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalidate_bumps_version(self, mock_cache, mock_redis):
        await mock_cache.invalidate_leaderboard()
        mock_redis.incr.assert_awaited_once_with("leaderboard:version")

    @pytest.mark.asyncio
    async def test_page_is_stored_under_the_version_it_was_read_with(
        self, mock_cache, mock_redis
    ):
        await mock_cache.set_leaderboard(10, [], "3", ttl=30)
        mock_redis.get.assert_not_awaited()
        mock_redis.setex.assert_awaited_once_with("leaderboard:v3:10", 30, "[]")

    @pytest.mark.asyncio
    async def test_corrupt_payload_is_a_miss(self, mock_cache, mock_redis):
        mock_redis.get = AsyncMock(return_value="{not json")
        assert await mock_cache.get_leaderboard(10, "0") is None


class TestRedisFailures:
    """Redis errors degrade to cache misses instead of failing requests."""

    @pytest.mark.asyncio
    async def test_get_error(self, mock_cache, mock_redis):
        mock_redis.get = AsyncMock(side_effect=ConnectionError("down"))
        assert await mock_cache.leaderboard_version() == "0"
        assert await mock_cache.get_leaderboard(10, "0") is None

    @pytest.mark.asyncio
    async def test_set_error(self, mock_cache, mock_redis):
        mock_redis.setex = AsyncMock(side_effect=ConnectionError("down"))
        await mock_cache.set_leaderboard(10, [], "0", ttl=30)

    @pytest.mark.asyncio
    async def test_invalidate_error(self, mock_cache, mock_redis):
        mock_redis.incr = AsyncMock(side_effect=ConnectionError("down"))
        await mock_cache.invalidate_leaderboard()

