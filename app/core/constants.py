from typing import FrozenSet

from app.schemas.common import RuleCategory

RULE_CATEGORIES: FrozenSet[str] = frozenset(c.value for c in RuleCategory)

# Fields a manager may change on a custom rule.  ``rule_key`` is the
# rule's identity and ``is_default`` its origin; neither ever changes.
CUSTOM_RULE_MUTABLE_FIELDS: FrozenSet[str] = frozenset(
    {
        "rule_name",
        "description",
        "category",
        "points",
        "trigger_condition",
        "is_active",
    }
)

MAX_LEADERBOARD_LIMIT: int = 500
MAX_EVENTS_PAGE_SIZE: int = 100

# Recorded as created_by on seeded default rules
SYSTEM_ACTOR: str = "system"

# PostgreSQL SQLSTATEs that mean "retry the whole transaction"
RETRYABLE_SQLSTATES: FrozenSet[str] = frozenset({"40001", "40P01"})
