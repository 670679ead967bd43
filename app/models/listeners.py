from sqlalchemy import event

from app.models.base import utcnow
from app.models.driver_score import DriverScore
from app.models.rule import ScoringRule
from app.models.score_history import ScoreHistory
from app.models.scoring_event import ScoringEvent


# Auto updated_at
@event.listens_for(ScoringRule, "before_update")
@event.listens_for(DriverScore, "before_update")
def update_timestamp(mapper, connection, target):
    target.updated_at = utcnow()


# Append-only tables
@event.listens_for(ScoringEvent, "before_update")
@event.listens_for(ScoreHistory, "before_update")
def block_update(mapper, connection, target):
    raise ValueError(f"{type(target).__name__} records are immutable")


@event.listens_for(ScoringEvent, "before_delete")
@event.listens_for(ScoreHistory, "before_delete")
def block_delete(mapper, connection, target):
    raise ValueError(f"{type(target).__name__} records cannot be deleted")
