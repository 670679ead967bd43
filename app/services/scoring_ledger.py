import logging
from typing import Any, Dict, List, Optional, Union

from app.core.cache import CacheService
from app.core.config import settings
from app.core.constants import MAX_EVENTS_PAGE_SIZE
from app.core.exceptions import (
    DriverNotFoundError,
    InvalidScoringDataError,
    RuleNotFoundError,
)
from app.models.base import utcnow
from app.models.driver_score import DriverScore
from app.models.score_history import ScoreHistory
from app.models.scoring_event import ScoringEvent
from app.repositories.driver_repository import DriverRepository
from app.repositories.event_repository import EventRepository
from app.repositories.rule_application_repository import RuleApplicationRepository
from app.repositories.rule_repository import RuleRepository
from app.repositories.score_history_repository import ScoreHistoryRepository
from app.repositories.score_repository import ScoreRepository

logger = logging.getLogger(__name__)

_MAX_PERIOD_LENGTH = 50


class ScoringLedger:
    """Apply rules to drivers and keep the log and aggregates consistent.

    Every write goes through one transaction that locks the driver's
    ``driver_scores`` row, so the tracker upsert, the event append and
    the aggregate update either all commit or all roll back.  Writes
    for different drivers never wait on each other.

    Re-applying a custom rule to the same driver keeps a single
    ``rule_applications`` row but appends a new event and awards the
    points again.
    """

    def __init__(
        self,
        driver_repo: DriverRepository,
        rule_repo: RuleRepository,
        event_repo: EventRepository,
        score_repo: ScoreRepository,
        application_repo: RuleApplicationRepository,
        history_repo: ScoreHistoryRepository,
        cache: Optional[CacheService] = None,
        base_points: Optional[int] = None,
    ) -> None:
        self._drivers = driver_repo
        self._rules = rule_repo
        self._events = event_repo
        self._scores = score_repo
        self._applications = application_repo
        self._history = history_repo
        self._cache: CacheService = cache or CacheService()
        self._base_points = (
            settings.SCORE_BASE_POINTS if base_points is None else base_points
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def apply_custom_rule(
        self,
        rule_ref: Union[int, str],
        driver_id: str,
        applied_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Award a rule's points to a driver.

        Steps (one transaction):
        1. Look the rule up by id or key; inactive counts as missing
        2. Verify the driver and lock its aggregate
        3. Upsert the ``(rule, driver)`` application record
        4. Append the event and apply the delta to the aggregate

        Raises:
            InvalidScoringDataError: ``driver_id`` is missing.
            RuleNotFoundError: The rule is absent or inactive.
            DriverNotFoundError: The registry does not know the driver.
        """
        if not driver_id:
            raise InvalidScoringDataError("driver_id is required")

        async with self._scores.atomic():
            rule = await self._rules.get_by_ref(rule_ref)
            if rule is None or not rule.is_active:
                raise RuleNotFoundError("Rule not found or inactive")
            await self._require_driver(driver_id)

            score = await self._scores.lock(driver_id, self._base_points)
            await self._applications.upsert(rule.id, driver_id, applied_by)
            event = await self._append_event(
                score,
                rule_id=rule.id,
                category=rule.category,
                event_name=rule.rule_name,
                points=rule.points,
                details={},
                is_custom=True,
                applied_by=applied_by,
            )
            result = {
                "rule_applied": rule.rule_name,
                "points_awarded": rule.points,
                "event": event,
            }

        logger.info(
            "Rule %s applied to driver %s by %s (%+d, score now %d)",
            rule.rule_key,
            driver_id,
            applied_by,
            rule.points,
            event.score_after,
        )
        await self._cache.invalidate_leaderboard()
        return result

    async def log_generic_event(
        self,
        *,
        driver_id: str,
        category: str,
        event_name: str,
        points: int,
        rule_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        is_custom: bool = False,
        applied_by: Optional[str] = None,
    ) -> ScoringEvent:
        """Append a one-shot event, bypassing the application tracker.

        Raises:
            InvalidScoringDataError: A required field is missing.
            DriverNotFoundError: The registry does not know the driver.
        """
        missing = [
            name
            for name, value in (
                ("driver_id", driver_id),
                ("category", category),
                ("event_name", event_name),
                ("points", points),
            )
            if value is None or value == ""
        ]
        if missing:
            raise InvalidScoringDataError(
                f"Missing required fields: {', '.join(missing)}"
            )
        if isinstance(points, bool) or not isinstance(points, int):
            raise InvalidScoringDataError("points must be an integer")

        async with self._scores.atomic():
            await self._require_driver(driver_id)
            score = await self._scores.lock(driver_id, self._base_points)
            event = await self._append_event(
                score,
                rule_id=rule_id,
                category=category,
                event_name=event_name,
                points=points,
                details=details,
                is_custom=bool(is_custom),
                applied_by=applied_by,
            )

        logger.info(
            "Event '%s' logged for driver %s (%+d, score now %d)",
            event_name,
            driver_id,
            points,
            event.score_after,
        )
        await self._cache.invalidate_leaderboard()
        return event

    async def reset_score(
        self, driver_id: str, period: Optional[str] = None
    ) -> ScoreHistory:
        """Archive the driver's current period and start a new one.

        The history entry and the cleared aggregate are written under the
        aggregate's row lock, so a reset never interleaves with an event
        append for the same driver.
        """
        period = (period or "").strip() or settings.RESET_DEFAULT_PERIOD
        if len(period) > _MAX_PERIOD_LENGTH:
            raise InvalidScoringDataError(
                f"period must be at most {_MAX_PERIOD_LENGTH} characters"
            )

        async with self._scores.atomic():
            await self._require_driver(driver_id)
            score = await self._scores.lock(driver_id, self._base_points)
            reset_at = utcnow()
            entry = await self._history.archive(
                driver_id=driver_id,
                period=period,
                final_score=score.current_score,
                events_count=score.events_count,
                end_date=reset_at,
            )
            await self._scores.reset(score, self._base_points, reset_at)

        logger.info(
            "Score reset for driver %s (period %s, final score %d)",
            driver_id,
            period,
            entry.final_score,
        )
        await self._cache.invalidate_leaderboard()
        return entry

    async def _append_event(
        self,
        score: DriverScore,
        *,
        rule_id: Optional[int],
        category: str,
        event_name: str,
        points: int,
        details: Optional[Dict[str, Any]],
        is_custom: bool,
        applied_by: Optional[str],
    ) -> ScoringEvent:
        # Caller holds the aggregate lock and the open transaction
        new_score = await self._scores.apply_delta(score, points)
        return await self._events.append(
            driver_id=score.driver_id,
            rule_id=rule_id,
            category=category,
            event_name=event_name,
            points=points,
            details=details,
            is_custom=is_custom,
            applied_by=applied_by,
            score_after=new_score,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_score(self, driver_id: str) -> Dict[str, Any]:
        """Return the driver, its aggregate, and its most recent events.

        A driver that was never scored gets an unsaved aggregate at the
        base score; nothing is written on this path.
        """
        driver = await self._drivers.get_by_id(driver_id)
        if driver is None:
            raise DriverNotFoundError(f"Driver {driver_id} not found")

        score = await self._scores.get(driver_id)
        if score is None:
            score = DriverScore(
                driver_id=driver_id,
                current_score=self._base_points,
                base_points=self._base_points,
                events_count=0,
                last_reset=None,
            )
        recent = await self._events.recent_for_driver(
            driver_id, limit=settings.RECENT_EVENTS_LIMIT
        )
        return {
            "driver_id": driver.driver_id,
            "first_name": driver.first_name,
            "last_name": driver.last_name,
            "email": driver.email,
            "current_score": score.current_score,
            "base_points": score.base_points,
            "events_count": score.events_count,
            "last_reset": score.last_reset,
            "updated_at": score.updated_at,
            "recent_events": recent,
        }

    async def recent_events(
        self, driver_id: str, limit: int = 10, offset: int = 0
    ) -> List[ScoringEvent]:
        """Return one page of a driver's events, most recent first."""
        if not 1 <= limit <= MAX_EVENTS_PAGE_SIZE:
            raise InvalidScoringDataError(
                f"limit must be between 1 and {MAX_EVENTS_PAGE_SIZE}"
            )
        if offset < 0:
            raise InvalidScoringDataError("offset must not be negative")
        await self._require_driver(driver_id)
        return await self._events.recent_for_driver(driver_id, limit, offset)

    async def score_history(self, driver_id: str) -> List[ScoreHistory]:
        await self._require_driver(driver_id)
        return await self._history.list_for_driver(driver_id)

    async def reconcile(self, driver_id: str) -> Dict[str, Any]:
        """Replay the log and compare it with the stored aggregate."""
        await self._require_driver(driver_id)
        score = await self._scores.get(driver_id)
        if score is None:
            stored, base, since = self._base_points, self._base_points, None
        else:
            stored, base, since = score.current_score, score.base_points, score.last_reset
        replayed = base + await self._events.sum_points_since(driver_id, since)

        if replayed != stored:
            logger.error(
                "Score drift for driver %s: stored %d, replayed %d",
                driver_id,
                stored,
                replayed,
            )
        return {
            "driver_id": driver_id,
            "stored_score": stored,
            "replayed_score": replayed,
            "consistent": replayed == stored,
        }

    async def _require_driver(self, driver_id: str) -> None:
        if not await self._drivers.exists(driver_id):
            raise DriverNotFoundError(f"Driver {driver_id} not found")
