from typing import Optional

from sqlalchemy import select

from app.models.driver import Driver
from app.repositories.base import BaseRepository


class DriverRepository(BaseRepository):
    """Read access to the ``drivers`` registry table."""

    async def get_by_id(self, driver_id: str) -> Optional[Driver]:
        """Return a single driver by primary key, or ``None``."""
        result = await self._db.execute(
            select(Driver).where(Driver.driver_id == driver_id)
        )
        return result.scalar_one_or_none()

    async def exists(self, driver_id: str) -> bool:
        result = await self._db.execute(
            select(Driver.driver_id).where(Driver.driver_id == driver_id)
        )
        return result.scalar_one_or_none() is not None
