import logging
from typing import Optional

from fastapi import Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Redis client factory
# ---------------------------------------------------------------------------


async def get_redis_client() -> Optional[Redis]:
    """Get an async Redis client instance using connection pooling."""
    try:
        client = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
        await client.ping()
        return client
    except Exception:
        logger.warning("Redis unavailable, caching disabled for this request")
        return None


async def get_cache_service(
    redis_client: Optional[Redis] = Depends(get_redis_client),
):
    """Build a :class:`CacheService` backed by the shared Redis client."""
    from app.core.cache import CacheService

    return CacheService(redis_client=redis_client)


# ---------------------------------------------------------------------------
# Repository factory functions (one per repository, each gets the shared db)
# ---------------------------------------------------------------------------


async def get_rule_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.rule_repository import RuleRepository

    return RuleRepository(db)


async def get_driver_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.driver_repository import DriverRepository

    return DriverRepository(db)


async def get_event_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.event_repository import EventRepository

    return EventRepository(db)


async def get_score_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.score_repository import ScoreRepository

    return ScoreRepository(db)


async def get_application_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.rule_application_repository import (
        RuleApplicationRepository,
    )

    return RuleApplicationRepository(db)


async def get_history_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.score_history_repository import ScoreHistoryRepository

    return ScoreHistoryRepository(db)


async def get_leaderboard_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.leaderboard_repository import LeaderboardRepository

    return LeaderboardRepository(db)


# ---------------------------------------------------------------------------
# Service factory functions
# ---------------------------------------------------------------------------


async def get_rule_catalog(
    rule_repo=Depends(get_rule_repo),
):
    """Build a :class:`RuleCatalogService` with injected repository."""
    from app.services.rule_catalog import RuleCatalogService

    return RuleCatalogService(rule_repo=rule_repo)


async def get_scoring_ledger(
    driver_repo=Depends(get_driver_repo),
    rule_repo=Depends(get_rule_repo),
    event_repo=Depends(get_event_repo),
    score_repo=Depends(get_score_repo),
    application_repo=Depends(get_application_repo),
    history_repo=Depends(get_history_repo),
    cache=Depends(get_cache_service),
):
    """Build a :class:`ScoringLedger`; every repository shares one session."""
    from app.services.scoring_ledger import ScoringLedger

    return ScoringLedger(
        driver_repo=driver_repo,
        rule_repo=rule_repo,
        event_repo=event_repo,
        score_repo=score_repo,
        application_repo=application_repo,
        history_repo=history_repo,
        cache=cache,
    )


async def get_leaderboard_service(
    repo=Depends(get_leaderboard_repo),
    cache=Depends(get_cache_service),
):
    """Build a :class:`LeaderboardService` with injected repository."""
    from app.services.leaderboard import LeaderboardService

    return LeaderboardService(repo=repo, cache=cache)
