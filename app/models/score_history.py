from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from app.models.base import Base, utcnow


class ScoreHistory(Base):
    """Archived score of one closed period, written by a reset."""

    __tablename__ = "score_history"
    id = Column(Integer, primary_key=True, autoincrement=True)
    driver_id = Column(
        String(64), ForeignKey("drivers.driver_id"), nullable=False
    )
    period = Column(String(50), nullable=False)
    final_score = Column(Integer, nullable=False)
    events_count = Column(Integer, nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (Index("ix_score_history_driver_id", "driver_id"),)
