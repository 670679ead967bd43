from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select

from app.models.base import utcnow
from app.models.scoring_event import ScoringEvent
from app.repositories.base import BaseRepository


class EventRepository(BaseRepository):
    """Append-only access to the ``scoring_events`` ledger.

    Rows are never updated or deleted.
    """

    async def append(
        self,
        *,
        driver_id: str,
        rule_id: Optional[int],
        category: str,
        event_name: str,
        points: int,
        details: Optional[Dict[str, Any]],
        is_custom: bool,
        applied_by: Optional[str],
        score_after: int,
    ) -> ScoringEvent:
        """Insert one ledger entry and flush to obtain its sequence id."""
        event = ScoringEvent(
            driver_id=driver_id,
            rule_id=rule_id,
            category=category,
            event_name=event_name,
            points=points,
            details=details or {},
            is_custom=is_custom,
            applied_by=applied_by,
            timestamp=utcnow(),
            score_after=score_after,
        )
        self._db.add(event)
        await self._db.flush()
        return event

    async def recent_for_driver(
        self, driver_id: str, limit: int = 10, offset: int = 0
    ) -> List[ScoringEvent]:
        """Return a driver's events, most recent first."""
        result = await self._db.execute(
            select(ScoringEvent)
            .where(ScoringEvent.driver_id == driver_id)
            .order_by(ScoringEvent.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_driver(self, driver_id: str) -> int:
        result = await self._db.execute(
            select(func.count())
            .select_from(ScoringEvent)
            .where(ScoringEvent.driver_id == driver_id)
        )
        return result.scalar() or 0

    async def sum_points_since(
        self, driver_id: str, since: Optional[datetime]
    ) -> int:
        """Sum point deltas for a driver after *since* (all time if ``None``)."""
        query = select(func.coalesce(func.sum(ScoringEvent.points), 0)).where(
            ScoringEvent.driver_id == driver_id
        )
        if since is not None:
            query = query.where(ScoringEvent.timestamp > since)
        result = await self._db.execute(query)
        return int(result.scalar() or 0)
