from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from app.models.base import Base, utcnow


class Driver(Base):
    """Fleet driver as known to the external driver registry.

    The ledger only reads this table: it validates driver ids against it
    and joins display names into score and leaderboard reads.
    """

    __tablename__ = "drivers"
    driver_id = Column(String(64), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True)
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
