"""Repository layer: all database access goes through here.

Repositories encapsulate SQLAlchemy queries so that the service layer
only contains ledger logic.
"""

from app.repositories.rule_repository import RuleRepository
from app.repositories.driver_repository import DriverRepository
from app.repositories.event_repository import EventRepository
from app.repositories.score_repository import ScoreRepository
from app.repositories.rule_application_repository import RuleApplicationRepository
from app.repositories.score_history_repository import ScoreHistoryRepository
from app.repositories.leaderboard_repository import LeaderboardRepository

__all__ = [
    "RuleRepository",
    "DriverRepository",
    "EventRepository",
    "ScoreRepository",
    "RuleApplicationRepository",
    "ScoreHistoryRepository",
    "LeaderboardRepository",
]
