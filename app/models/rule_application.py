from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.sql import expression

from app.models.base import Base, utcnow


class RuleApplication(Base):
    """Whether a standing rule condition is currently flagged for a driver.

    At most one row per ``(rule_id, driver_id)``; re-applying a rule
    refreshes the row instead of adding one.
    """

    __tablename__ = "rule_applications"
    id = Column(Integer, primary_key=True, autoincrement=True)
    rule_id = Column(
        Integer, ForeignKey("scoring_rules.id", ondelete="CASCADE"), nullable=False
    )
    driver_id = Column(
        String(64), ForeignKey("drivers.driver_id"), nullable=False
    )
    is_active = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    applied_by = Column(String(100))
    applied_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("rule_id", "driver_id", name="uq_rule_applications_rule_driver"),
    )
