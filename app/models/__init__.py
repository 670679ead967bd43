from app.models.base import Base
from app.models.driver import Driver
from app.models.rule import ScoringRule
from app.models.scoring_event import ScoringEvent
from app.models.driver_score import DriverScore
from app.models.rule_application import RuleApplication
from app.models.score_history import ScoreHistory

# Import event listeners to register them
from app.models import listeners  # noqa: F401

__all__ = [
    "Base",
    "Driver",
    "ScoringRule",
    "ScoringEvent",
    "DriverScore",
    "RuleApplication",
    "ScoreHistory",
]
