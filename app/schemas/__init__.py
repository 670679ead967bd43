"""Pydantic schemas package: re-exports for convenience."""

# Common
from app.schemas.common import (
    RuleCategory as RuleCategory,
    SuccessResponse as SuccessResponse,
    MessageResponse as MessageResponse,
)

# Rule catalog schemas
from app.schemas.rule import (
    RuleCreate as RuleCreate,
    RuleUpdate as RuleUpdate,
    DefaultRuleUpdate as DefaultRuleUpdate,
    RuleOut as RuleOut,
    RuleResponse as RuleResponse,
    RuleListResponse as RuleListResponse,
)

# Scoring ledger schemas
from app.schemas.scoring import (
    ApplyRuleRequest as ApplyRuleRequest,
    GenericEventRequest as GenericEventRequest,
    ResetRequest as ResetRequest,
    ScoringEventOut as ScoringEventOut,
    RuleApplicationOut as RuleApplicationOut,
    ScoreHistoryOut as ScoreHistoryOut,
    DriverScoreOut as DriverScoreOut,
    DriverScoreSummary as DriverScoreSummary,
    ReconcileOut as ReconcileOut,
    RuleApplicationResponse as RuleApplicationResponse,
    ScoringEventResponse as ScoringEventResponse,
    ScoringEventListResponse as ScoringEventListResponse,
    DriverScoreResponse as DriverScoreResponse,
    DriverScoreListResponse as DriverScoreListResponse,
    ResetResponse as ResetResponse,
    ScoreHistoryResponse as ScoreHistoryResponse,
    ReconcileResponse as ReconcileResponse,
)

# Leaderboard schemas
from app.schemas.leaderboard import (
    LeaderboardEntry as LeaderboardEntry,
    LeaderboardResponse as LeaderboardResponse,
)
