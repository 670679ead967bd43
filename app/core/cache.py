import json
import logging
from typing import Any, List, Optional

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

_LEADERBOARD_VERSION_KEY = "leaderboard:version"


class CacheService:
    """Thin wrapper around an async Redis client.

    If *redis_client* is ``None`` (Redis unavailable), every operation
    degrades to a no-op, so callers never need to check for ``None``.

    Leaderboard pages are cached under a versioned key.  Writers never
    delete pages; they bump the version so every stale page becomes
    unreachable at once and simply expires.
    """

    def __init__(self, redis_client: Optional[Redis] = None) -> None:
        self._redis: Optional[Redis] = redis_client

    # ------------------------------------------------------------------
    # Core get / set
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Optional[str]:
        """Return the raw string value for *key*, or ``None``."""
        if self._redis is None:
            return None
        try:
            return await self._redis.get(key)
        except Exception:
            logger.warning("Redis GET failed for key %s", key)
            return None

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store a raw string value, optionally with a TTL (seconds)."""
        if self._redis is None:
            return
        try:
            if ttl:
                await self._redis.setex(key, ttl, value)
            else:
                await self._redis.set(key, value)
        except Exception:
            logger.warning("Redis SET failed for key %s", key)

    # ------------------------------------------------------------------
    # Leaderboard pages
    # ------------------------------------------------------------------

    async def leaderboard_version(self) -> str:
        """Return the current leaderboard version (``"0"`` before any write).

        Read it once per request and pass it to both
        :meth:`get_leaderboard` and :meth:`set_leaderboard`, so a page
        computed before a write is never stored under the newer version.
        """
        return await self.get(_LEADERBOARD_VERSION_KEY) or "0"

    @staticmethod
    def _leaderboard_key(limit: int, version: str) -> str:
        return f"leaderboard:v{version}:{limit}"

    async def get_leaderboard(
        self, limit: int, version: str
    ) -> Optional[List[Any]]:
        """Return a cached leaderboard page, or ``None`` on a miss."""
        if self._redis is None:
            return None
        raw = await self.get(self._leaderboard_key(limit, version))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Invalid JSON in cached leaderboard (limit=%d)", limit)
            return None

    async def set_leaderboard(
        self, limit: int, rows: List[Any], version: str, ttl: int | None = None
    ) -> None:
        """Serialise a leaderboard page to JSON and store it."""
        if self._redis is None:
            return
        try:
            payload = json.dumps(rows, default=str)
        except (TypeError, ValueError):
            logger.warning("Failed to serialise leaderboard (limit=%d)", limit)
            return
        await self.set(self._leaderboard_key(limit, version), payload, ttl=ttl)

    async def invalidate_leaderboard(self) -> None:
        """Make every cached leaderboard page stale (best-effort)."""
        if self._redis is None:
            return
        try:
            await self._redis.incr(_LEADERBOARD_VERSION_KEY)
        except Exception:
            logger.warning("Redis INCR failed for key %s", _LEADERBOARD_VERSION_KEY)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def is_available(self) -> bool:
        """Return ``True`` if a Redis client is configured."""
        return self._redis is not None
