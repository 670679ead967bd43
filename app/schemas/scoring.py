"""Scoring ledger schemas: events, rule application, resets, history."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from app.schemas.common import SuccessResponse


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ApplyRuleRequest(BaseModel):
    """Request body for POST /api/v1/scoring/custom-rule/{rule_ref}."""

    driver_id: str = Field(..., min_length=1, max_length=64)
    applied_by: Optional[str] = Field(None, max_length=100)


class GenericEventRequest(BaseModel):
    """Request body for POST /api/v1/scoring/log."""

    driver_id: str = Field(..., min_length=1, max_length=64)
    rule_id: Optional[int] = None
    category: str = Field(..., min_length=1, max_length=50)
    event_name: str = Field(..., min_length=1, max_length=200)
    points: StrictInt
    details: Dict[str, Any] = Field(default_factory=dict)
    is_custom: bool = False
    applied_by: Optional[str] = Field(None, max_length=100)


class ResetRequest(BaseModel):
    """Request body for POST /api/v1/drivers/{driver_id}/reset."""

    period: Optional[str] = Field(None, max_length=50)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ScoringEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    driver_id: str
    rule_id: Optional[int] = None
    category: str
    event_name: str
    points: int
    details: Dict[str, Any] = Field(default_factory=dict)
    is_custom: bool
    applied_by: Optional[str] = None
    timestamp: datetime
    score_after: int


class RuleApplicationOut(BaseModel):
    rule_applied: str
    points_awarded: int
    event: ScoringEventOut


class ScoreHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    driver_id: str
    period: str
    final_score: int
    events_count: int
    end_date: datetime


class DriverScoreOut(BaseModel):
    driver_id: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    current_score: int
    base_points: int
    events_count: int
    last_reset: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    recent_events: List[ScoringEventOut] = Field(default_factory=list)


class DriverScoreSummary(BaseModel):
    driver_id: str
    first_name: str
    last_name: str
    current_score: int
    events_count: int
    last_reset: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReconcileOut(BaseModel):
    driver_id: str
    stored_score: int
    replayed_score: int
    consistent: bool


class RuleApplicationResponse(SuccessResponse):
    message: str = "Custom rule applied successfully"
    data: RuleApplicationOut


class ScoringEventResponse(SuccessResponse):
    data: ScoringEventOut


class ScoringEventListResponse(SuccessResponse):
    data: List[ScoringEventOut]


class DriverScoreResponse(SuccessResponse):
    data: DriverScoreOut


class DriverScoreListResponse(SuccessResponse):
    data: List[DriverScoreSummary]


class ResetResponse(SuccessResponse):
    message: str = "Driver score reset successfully"
    data: ScoreHistoryOut


class ScoreHistoryResponse(SuccessResponse):
    data: List[ScoreHistoryOut]


class ReconcileResponse(SuccessResponse):
    data: ReconcileOut
