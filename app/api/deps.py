"""API-layer dependency functions.

Re-exports all dependency factories from ``app.dependencies`` so that
endpoint modules only need to import from ``app.api.deps``.
"""

from app.dependencies import (
    # Repository factories
    get_rule_repo,
    get_driver_repo,
    get_event_repo,
    get_score_repo,
    get_application_repo,
    get_history_repo,
    get_leaderboard_repo,
    # Service factories
    get_rule_catalog,
    get_scoring_ledger,
    get_leaderboard_service,
    # Redis
    get_redis_client,
    get_cache_service,
)

__all__ = [
    "get_rule_repo",
    "get_driver_repo",
    "get_event_repo",
    "get_score_repo",
    "get_application_repo",
    "get_history_repo",
    "get_leaderboard_repo",
    "get_rule_catalog",
    "get_scoring_ledger",
    "get_leaderboard_service",
    "get_redis_client",
    "get_cache_service",
]
