from fastapi import APIRouter, Depends, Request

from app.core.config import settings
from app.core.rate_limit import limiter
from app.schemas.common import MessageResponse
from app.schemas.rule import (
    DefaultRuleUpdate,
    RuleCreate,
    RuleListResponse,
    RuleOut,
    RuleResponse,
    RuleUpdate,
)
from app.services.rule_catalog import RuleCatalogService
from app.api.deps import get_rule_catalog

router = APIRouter(tags=["Rules"])


# ---------------------------------------------------------------------------
# System rules
# ---------------------------------------------------------------------------


@router.get("/scoring-config", response_model=RuleListResponse)
async def get_scoring_config(
    catalog: RuleCatalogService = Depends(get_rule_catalog),
) -> RuleListResponse:
    """Return the default (system) rules."""
    rules = await catalog.get_default_rules()
    return RuleListResponse(data=[RuleOut.model_validate(r) for r in rules])


@router.put("/scoring-config", response_model=RuleResponse)
@limiter.limit(settings.RATE_LIMIT)
async def update_scoring_config(
    request: Request,
    body: DefaultRuleUpdate,
    catalog: RuleCatalogService = Depends(get_rule_catalog),
) -> RuleResponse:
    """Tune ``points`` / ``is_active`` on a system rule."""
    rule = await catalog.update_default_rule(
        body.rule_key, points=body.points, is_active=body.is_active
    )
    return RuleResponse(data=RuleOut.model_validate(rule))


# ---------------------------------------------------------------------------
# Rule management
# ---------------------------------------------------------------------------


@router.get("/rules", response_model=RuleListResponse)
async def list_rules(
    catalog: RuleCatalogService = Depends(get_rule_catalog),
) -> RuleListResponse:
    """Return every rule grouped by category, then name."""
    rules = await catalog.list_rules()
    return RuleListResponse(data=[RuleOut.model_validate(r) for r in rules])


@router.post("/rules", response_model=RuleResponse, status_code=201)
@limiter.limit(settings.RATE_LIMIT)
async def create_rule(
    request: Request,
    body: RuleCreate,
    catalog: RuleCatalogService = Depends(get_rule_catalog),
) -> RuleResponse:
    """Create a manager-defined custom rule."""
    rule = await catalog.create_custom_rule(**body.model_dump())
    return RuleResponse(data=RuleOut.model_validate(rule))


@router.put("/rules/{rule_id}", response_model=RuleResponse)
@limiter.limit(settings.RATE_LIMIT)
async def update_rule(
    request: Request,
    rule_id: int,
    body: RuleUpdate,
    catalog: RuleCatalogService = Depends(get_rule_catalog),
) -> RuleResponse:
    """Merge-patch a custom rule; omitted fields are preserved."""
    rule = await catalog.update_custom_rule(
        rule_id, body.model_dump(exclude_unset=True)
    )
    return RuleResponse(data=RuleOut.model_validate(rule))


@router.delete("/rules/{rule_id}", response_model=MessageResponse)
@limiter.limit(settings.RATE_LIMIT)
async def delete_rule(
    request: Request,
    rule_id: int,
    catalog: RuleCatalogService = Depends(get_rule_catalog),
) -> MessageResponse:
    """Delete a custom rule.  System rules answer 404."""
    await catalog.delete_custom_rule(rule_id)
    return MessageResponse(message="Rule deleted successfully")
