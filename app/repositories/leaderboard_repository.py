from typing import Any, Dict, List, Optional

from sqlalchemy import func, literal, select

from app.models.driver import Driver
from app.models.driver_score import DriverScore
from app.repositories.base import BaseRepository


class LeaderboardRepository(BaseRepository):
    """Read-only ranking queries over drivers and their aggregates."""

    async def ranked_scores(
        self, base_points: int, limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Return every registered driver with its current score.

        Drivers that were never scored report *base_points* and zero
        events.  Ordered by score descending, then driver id ascending,
        so equal scores always come back in the same order.
        """
        current_score = func.coalesce(DriverScore.current_score, literal(base_points))
        query = (
            select(
                Driver.driver_id,
                Driver.first_name,
                Driver.last_name,
                current_score.label("current_score"),
                func.coalesce(DriverScore.events_count, 0).label("events_count"),
                DriverScore.last_reset,
                DriverScore.updated_at,
            )
            .select_from(Driver)
            .outerjoin(DriverScore, DriverScore.driver_id == Driver.driver_id)
            .order_by(current_score.desc(), Driver.driver_id.asc())
        )
        if limit is not None:
            query = query.limit(limit)

        result = await self._db.execute(query)
        return [dict(row) for row in result.mappings().all()]
