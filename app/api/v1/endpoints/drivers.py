from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.config import settings
from app.core.constants import MAX_EVENTS_PAGE_SIZE
from app.core.rate_limit import limiter
from app.schemas.scoring import (
    DriverScoreListResponse,
    DriverScoreOut,
    DriverScoreResponse,
    DriverScoreSummary,
    ReconcileOut,
    ReconcileResponse,
    ResetRequest,
    ResetResponse,
    ScoreHistoryOut,
    ScoreHistoryResponse,
    ScoringEventListResponse,
    ScoringEventOut,
)
from app.services.leaderboard import LeaderboardService
from app.services.scoring_ledger import ScoringLedger
from app.api.deps import get_leaderboard_service, get_scoring_ledger

router = APIRouter(prefix="/drivers", tags=["Drivers"])


@router.get("/scores", response_model=DriverScoreListResponse)
async def list_all_scores(
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> DriverScoreListResponse:
    """Return every registered driver's score, highest first."""
    rows = await service.list_all_scores()
    return DriverScoreListResponse(
        data=[DriverScoreSummary(**row) for row in rows]
    )


@router.get("/{driver_id}/score", response_model=DriverScoreResponse)
async def get_driver_score(
    driver_id: str,
    ledger: ScoringLedger = Depends(get_scoring_ledger),
) -> DriverScoreResponse:
    """Return the driver's current score with its most recent events."""
    data = await ledger.get_score(driver_id)
    recent = [ScoringEventOut.model_validate(e) for e in data.pop("recent_events")]
    return DriverScoreResponse(data=DriverScoreOut(**data, recent_events=recent))


@router.get("/{driver_id}/score/reconcile", response_model=ReconcileResponse)
async def reconcile_driver_score(
    driver_id: str,
    ledger: ScoringLedger = Depends(get_scoring_ledger),
) -> ReconcileResponse:
    """Replay the event log and compare it with the stored score."""
    return ReconcileResponse(data=ReconcileOut(**await ledger.reconcile(driver_id)))


@router.get("/{driver_id}/events", response_model=ScoringEventListResponse)
async def list_driver_events(
    driver_id: str,
    limit: int = Query(10, ge=1, le=MAX_EVENTS_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    ledger: ScoringLedger = Depends(get_scoring_ledger),
) -> ScoringEventListResponse:
    """Page through the driver's event log, most recent first."""
    events = await ledger.recent_events(driver_id, limit=limit, offset=offset)
    return ScoringEventListResponse(
        data=[ScoringEventOut.model_validate(e) for e in events]
    )


@router.get("/{driver_id}/history", response_model=ScoreHistoryResponse)
async def list_driver_history(
    driver_id: str,
    ledger: ScoringLedger = Depends(get_scoring_ledger),
) -> ScoreHistoryResponse:
    """Return the driver's archived score periods, newest first."""
    entries = await ledger.score_history(driver_id)
    return ScoreHistoryResponse(
        data=[ScoreHistoryOut.model_validate(e) for e in entries]
    )


@router.post("/{driver_id}/reset", response_model=ResetResponse)
@limiter.limit(settings.RATE_LIMIT)
async def reset_driver_score(
    request: Request,
    driver_id: str,
    body: Optional[ResetRequest] = None,
    ledger: ScoringLedger = Depends(get_scoring_ledger),
) -> ResetResponse:
    """Archive the current period and reset the driver to the base score."""
    period = body.period if body else None
    entry = await ledger.reset_score(driver_id, period=period)
    return ResetResponse(data=ScoreHistoryOut.model_validate(entry))
