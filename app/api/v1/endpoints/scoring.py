from fastapi import APIRouter, Depends, Request

from app.core.config import settings
from app.core.rate_limit import limiter
from app.schemas.scoring import (
    ApplyRuleRequest,
    GenericEventRequest,
    RuleApplicationOut,
    RuleApplicationResponse,
    ScoringEventOut,
    ScoringEventResponse,
)
from app.services.scoring_ledger import ScoringLedger
from app.api.deps import get_scoring_ledger

router = APIRouter(prefix="/scoring", tags=["Scoring"])


@router.post("/custom-rule/{rule_ref}", response_model=RuleApplicationResponse)
@limiter.limit(settings.RATE_LIMIT)
async def apply_custom_rule(
    request: Request,
    rule_ref: str,
    body: ApplyRuleRequest,
    ledger: ScoringLedger = Depends(get_scoring_ledger),
) -> RuleApplicationResponse:
    """Apply a rule (by id or key) to a driver and award its points."""
    result = await ledger.apply_custom_rule(
        rule_ref, body.driver_id, applied_by=body.applied_by
    )
    return RuleApplicationResponse(
        data=RuleApplicationOut(
            rule_applied=result["rule_applied"],
            points_awarded=result["points_awarded"],
            event=ScoringEventOut.model_validate(result["event"]),
        )
    )


@router.post("/log", response_model=ScoringEventResponse, status_code=201)
@limiter.limit(settings.RATE_LIMIT)
async def log_event(
    request: Request,
    body: GenericEventRequest,
    ledger: ScoringLedger = Depends(get_scoring_ledger),
) -> ScoringEventResponse:
    """Record a one-shot built-in event for a driver."""
    event = await ledger.log_generic_event(**body.model_dump())
    return ScoringEventResponse(data=ScoringEventOut.model_validate(event))
