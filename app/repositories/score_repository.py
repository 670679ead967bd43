from datetime import datetime
from typing import Optional

from sqlalchemy import select

from app.models.base import utcnow
from app.models.driver_score import DriverScore
from app.repositories.base import BaseRepository


class ScoreRepository(BaseRepository):
    """Encapsulates access to the ``driver_scores`` aggregate rows."""

    async def get(self, driver_id: str) -> Optional[DriverScore]:
        """Return the aggregate for a driver without locking it."""
        result = await self._db.execute(
            select(DriverScore).where(DriverScore.driver_id == driver_id)
        )
        return result.scalar_one_or_none()

    async def lock(self, driver_id: str, base_points: int) -> DriverScore:
        """Return the driver's aggregate row, locked for this transaction.

        The row is created first if missing (``ON CONFLICT DO NOTHING``
        makes concurrent first-events safe), then re-read with
        ``SELECT ... FOR UPDATE`` so appends and resets for the same
        driver serialize while other drivers proceed independently.
        """
        now = utcnow()
        await self._db.execute(
            self._insert(DriverScore.__table__)
            .values(
                driver_id=driver_id,
                current_score=base_points,
                base_points=base_points,
                events_count=0,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["driver_id"])
        )
        result = await self._db.execute(
            select(DriverScore)
            .where(DriverScore.driver_id == driver_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def apply_delta(self, score: DriverScore, points: int) -> int:
        """Add *points* to a locked aggregate and return the new score.

        Only the ledger's event-append path calls this, so the aggregate
        can never move without a matching event.
        """
        score.current_score = score.current_score + points
        score.events_count = score.events_count + 1
        await self._db.flush()
        return score.current_score

    async def reset(
        self, score: DriverScore, base_points: int, reset_at: datetime
    ) -> DriverScore:
        """Start a new period on a locked aggregate."""
        score.current_score = base_points
        score.base_points = base_points
        score.events_count = 0
        score.last_reset = reset_at
        await self._db.flush()
        return score
