from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import expression, func

from app.models.base import Base, JSONType, utcnow


class ScoringRule(Base):
    """A named condition worth a signed number of points.

    ``is_default`` separates system rules (seeded from
    ``DEFAULT_RULES``, only ``points``/``is_active`` editable, never
    deleted) from manager-created custom rules.  ``trigger_condition``
    is opaque here; the telemetry pipeline interprets it.
    """

    __tablename__ = "scoring_rules"
    __table_args__ = (Index("ix_scoring_rules_category_name", "category", "rule_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    rule_key = Column(String(100), unique=True, nullable=False)
    rule_name = Column(String(200), nullable=False)
    description = Column(Text)
    category = Column(String(50), nullable=False)
    points = Column(Integer, nullable=False)
    trigger_condition = Column(JSONType, nullable=False, default=dict)
    is_active = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    is_default = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    created_by = Column(String(100))
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
