from typing import List, Optional

from sqlalchemy import select

from app.models.base import utcnow
from app.models.rule_application import RuleApplication
from app.repositories.base import BaseRepository


class RuleApplicationRepository(BaseRepository):
    """Encapsulates the ``rule_applications`` idempotency ledger."""

    async def upsert(
        self, rule_id: int, driver_id: str, applied_by: Optional[str]
    ) -> None:
        """Flag ``(rule_id, driver_id)`` as active.

        Inserts the pair on first application; afterwards only
        ``is_active`` and ``applied_at`` are refreshed, keeping the
        original ``applied_by``.
        """
        now = utcnow()
        stmt = self._insert(RuleApplication.__table__).values(
            rule_id=rule_id,
            driver_id=driver_id,
            applied_by=applied_by,
            is_active=True,
            applied_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["rule_id", "driver_id"],
            set_={"is_active": True, "applied_at": now},
        )
        await self._db.execute(stmt)

    async def get(self, rule_id: int, driver_id: str) -> Optional[RuleApplication]:
        result = await self._db.execute(
            select(RuleApplication)
            .where(
                RuleApplication.rule_id == rule_id,
                RuleApplication.driver_id == driver_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_driver(self, driver_id: str) -> List[RuleApplication]:
        result = await self._db.execute(
            select(RuleApplication)
            .where(RuleApplication.driver_id == driver_id)
            .order_by(RuleApplication.applied_at.desc())
        )
        return list(result.scalars().all())
