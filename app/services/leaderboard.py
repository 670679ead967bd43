import logging
from typing import Any, Dict, List, Optional

from app.core.cache import CacheService
from app.core.config import settings
from app.core.constants import MAX_LEADERBOARD_LIMIT
from app.core.exceptions import InvalidScoringDataError
from app.repositories.leaderboard_repository import LeaderboardRepository

logger = logging.getLogger(__name__)


class LeaderboardService:
    """Read-only ranked projection of every driver's current score.

    Ranks are 1-based positions in the (score desc, driver id asc)
    ordering, so tied drivers get distinct consecutive ranks in a
    stable order.  Pages are cached in Redis when available; the ledger
    invalidates them after each committed write.
    """

    def __init__(
        self,
        repo: LeaderboardRepository,
        cache: Optional[CacheService] = None,
        base_points: Optional[int] = None,
    ) -> None:
        self._repo = repo
        self._cache: CacheService = cache or CacheService()
        self._base_points = (
            settings.SCORE_BASE_POINTS if base_points is None else base_points
        )

    async def leaderboard(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        if limit is None:
            limit = settings.LEADERBOARD_DEFAULT_LIMIT
        if not 1 <= limit <= MAX_LEADERBOARD_LIMIT:
            raise InvalidScoringDataError(
                f"limit must be between 1 and {MAX_LEADERBOARD_LIMIT}"
            )

        version = await self._cache.leaderboard_version()
        cached = await self._cache.get_leaderboard(limit, version)
        if cached is not None:
            return cached

        rows = await self._repo.ranked_scores(self._base_points, limit=limit)
        board = [
            {
                "rank": position,
                "driver_id": row["driver_id"],
                "name": f"{row['first_name']} {row['last_name']}".strip(),
                "current_score": row["current_score"],
                "last_reset": row["last_reset"],
                "events_count": row["events_count"],
            }
            for position, row in enumerate(rows, start=1)
        ]
        await self._cache.set_leaderboard(
            limit, board, version, ttl=settings.LEADERBOARD_CACHE_TTL
        )
        return board

    async def list_all_scores(self) -> List[Dict[str, Any]]:
        """Return every registered driver's score, highest first."""
        return await self._repo.ranked_scores(self._base_points)
