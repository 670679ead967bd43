from datetime import datetime
from typing import List

from sqlalchemy import select

from app.models.score_history import ScoreHistory
from app.repositories.base import BaseRepository


class ScoreHistoryRepository(BaseRepository):
    """Append-only access to archived score periods."""

    async def archive(
        self,
        *,
        driver_id: str,
        period: str,
        final_score: int,
        events_count: int,
        end_date: datetime,
    ) -> ScoreHistory:
        entry = ScoreHistory(
            driver_id=driver_id,
            period=period,
            final_score=final_score,
            events_count=events_count,
            end_date=end_date,
        )
        self._db.add(entry)
        await self._db.flush()
        return entry

    async def list_for_driver(self, driver_id: str) -> List[ScoreHistory]:
        """Return a driver's archived periods, newest first."""
        result = await self._db.execute(
            select(ScoreHistory)
            .where(ScoreHistory.driver_id == driver_id)
            .order_by(ScoreHistory.id.desc())
        )
        return list(result.scalars().all())
