from app.core.constants import (
    CUSTOM_RULE_MUTABLE_FIELDS,
    MAX_EVENTS_PAGE_SIZE,
    MAX_LEADERBOARD_LIMIT,
    RULE_CATEGORIES,
)
from app.core.default_rules import DEFAULT_RULES
from app.models import ScoringRule
from app.schemas.common import RuleCategory
from app.schemas.rule import RuleUpdate


class TestConstantsConsistency:
    """Verify that constants, enums, default rules and schemas stay in sync."""

    def test_categories_match_enum(self):
        assert RULE_CATEGORIES == {member.value for member in RuleCategory}

    def test_default_rules_use_known_categories(self):
        for rule in DEFAULT_RULES:
            assert rule["category"] in RULE_CATEGORIES, rule["rule_key"]

    def test_every_category_has_a_default_rule(self):
        assert {rule["category"] for rule in DEFAULT_RULES} == RULE_CATEGORIES

    def test_default_rule_keys_are_unique(self):
        keys = [rule["rule_key"] for rule in DEFAULT_RULES]
        assert len(keys) == len(set(keys))

    def test_default_rules_have_integer_points(self):
        for rule in DEFAULT_RULES:
            assert isinstance(rule["points"], int), rule["rule_key"]
            assert isinstance(rule["trigger_condition"], dict), rule["rule_key"]

    def test_default_rules_only_use_model_columns(self):
        columns = set(ScoringRule.__table__.columns.keys())
        for rule in DEFAULT_RULES:
            assert set(rule) <= columns

    def test_mutable_fields_match_update_schema(self):
        assert set(RuleUpdate.model_fields) == CUSTOM_RULE_MUTABLE_FIELDS

    def test_identity_fields_are_immutable(self):
        assert "rule_key" not in CUSTOM_RULE_MUTABLE_FIELDS
        assert "is_default" not in CUSTOM_RULE_MUTABLE_FIELDS

    def test_page_limits(self):
        assert MAX_LEADERBOARD_LIMIT == 500
        assert MAX_EVENTS_PAGE_SIZE == 100
