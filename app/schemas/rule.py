"""Rule catalog schemas (create, update, response)."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from app.schemas.common import SuccessResponse


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class RuleCreate(BaseModel):
    """Request body for POST /api/v1/rules."""

    rule_key: str = Field(..., min_length=1, max_length=100)
    rule_name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=50)
    points: StrictInt
    trigger_condition: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None
    created_by: Optional[str] = Field(None, max_length=100)


class RuleUpdate(BaseModel):
    """Merge-patch body for PUT /api/v1/rules/{rule_id}.

    Omitted (or null) fields keep their stored value.
    """

    model_config = ConfigDict(extra="forbid")

    rule_name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    points: Optional[StrictInt] = None
    trigger_condition: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class DefaultRuleUpdate(BaseModel):
    """Request body for PUT /api/v1/scoring-config."""

    rule_key: str = Field(..., min_length=1)
    points: Optional[StrictInt] = None
    is_active: Optional[bool] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rule_key: str
    rule_name: str
    description: Optional[str] = None
    category: str
    points: int
    trigger_condition: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool
    is_default: bool
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RuleResponse(SuccessResponse):
    data: RuleOut


class RuleListResponse(SuccessResponse):
    data: List[RuleOut]
