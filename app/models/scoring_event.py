from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.sql import expression

from app.models.base import Base, JSONType, utcnow


class ScoringEvent(Base):
    """One immutable point-delta application to one driver.

    ``score_after`` is the aggregate's value right after this event was
    applied, captured in the same transaction.  ``rule_id`` is a plain
    reference rather than a foreign key so that deleting a custom rule
    never rewrites history.  Update and delete are rejected by the ORM
    listeners in ``app.models.listeners``.
    """

    __tablename__ = "scoring_events"
    id = Column(Integer, primary_key=True, autoincrement=True)
    driver_id = Column(
        String(64), ForeignKey("drivers.driver_id"), nullable=False
    )
    rule_id = Column(Integer, nullable=True)
    category = Column(String(50), nullable=False)
    event_name = Column(String(200), nullable=False)
    points = Column(Integer, nullable=False)
    details = Column(JSONType, nullable=False, default=dict)
    is_custom = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    applied_by = Column(String(100))
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    score_after = Column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_scoring_events_driver_id_id", "driver_id", "id"),
        Index("ix_scoring_events_driver_id_timestamp", "driver_id", "timestamp"),
    )
