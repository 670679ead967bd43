from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from app.models.base import Base, utcnow


class DriverScore(Base):
    """Per-driver running score, derived from ``scoring_events``.

    Kept consistent by construction: every event append and every reset
    updates this row in the same transaction as the log write, so
    ``current_score == base_points + sum(points since last_reset)``.
    ``base_points`` is stored per row so a later change to the configured
    base never breaks that equation for an open period.
    """

    __tablename__ = "driver_scores"
    driver_id = Column(
        String(64), ForeignKey("drivers.driver_id"), primary_key=True
    )
    current_score = Column(Integer, nullable=False, default=0)
    base_points = Column(Integer, nullable=False, default=0)
    events_count = Column(Integer, nullable=False, default=0, server_default="0")
    last_reset = Column(DateTime(timezone=True))
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
