import pytest

from app.core.default_rules import DEFAULT_RULES
from app.core.exceptions import (
    DuplicateRuleKeyError,
    InvalidScoringDataError,
    RuleNotFoundError,
)
from app.models import ScoringRule
from app.repositories import EventRepository, RuleApplicationRepository


async def _create(catalog, **overrides):
    data = {
        "rule_key": "late_delivery",
        "rule_name": "Late Delivery",
        "description": "Delivery window missed",
        "category": "Compliance",
        "points": -5,
        "trigger_condition": {"minutes_late": 30},
        "created_by": "mgr-1",
    }
    data.update(overrides)
    return await catalog.create_custom_rule(**data)


class TestDefaultRules:
    @pytest.mark.asyncio
    async def test_seed_inserts_every_default_rule(self, catalog):
        inserted = await catalog.seed_default_rules()
        assert inserted == len(DEFAULT_RULES)

        rules = await catalog.get_default_rules()
        assert {r.rule_key for r in rules} == {r["rule_key"] for r in DEFAULT_RULES}
        assert all(r.is_default and r.is_active for r in rules)
        assert all(r.created_by == "system" for r in rules)

    @pytest.mark.asyncio
    async def test_reseed_keeps_tuned_points(self, catalog):
        await catalog.seed_default_rules()
        await catalog.update_default_rule("speeding", points=-7)

        assert await catalog.seed_default_rules() == 0
        rules = {r.rule_key: r for r in await catalog.get_default_rules()}
        assert rules["speeding"].points == -7

    @pytest.mark.asyncio
    async def test_update_points_and_active(self, catalog):
        await catalog.seed_default_rules()
        rule = await catalog.update_default_rule(
            "phone_usage", points=-12, is_active=False
        )
        assert rule.points == -12
        assert rule.is_active is False

    @pytest.mark.asyncio
    async def test_update_with_no_fields_is_a_no_op(self, catalog):
        await catalog.seed_default_rules()
        rule = await catalog.update_default_rule("drowsiness")
        assert rule.points == -8
        assert rule.is_active is True

    @pytest.mark.asyncio
    async def test_update_unknown_system_rule(self, catalog):
        await catalog.seed_default_rules()
        with pytest.raises(RuleNotFoundError, match="System rule not found"):
            await catalog.update_default_rule("no_such_rule", points=1)

    @pytest.mark.asyncio
    async def test_custom_rule_is_not_a_system_rule(self, catalog):
        await _create(catalog)
        with pytest.raises(RuleNotFoundError):
            await catalog.update_default_rule("late_delivery", points=1)

    @pytest.mark.asyncio
    async def test_default_rules_cannot_be_edited_or_deleted_as_custom(
        self, catalog
    ):
        await catalog.seed_default_rules()
        rules = {r.rule_key: r for r in await catalog.get_default_rules()}
        speeding_id = rules["speeding"].id
        with pytest.raises(RuleNotFoundError, match="system rule"):
            await catalog.update_custom_rule(speeding_id, {"points": 0})
        with pytest.raises(RuleNotFoundError):
            await catalog.delete_custom_rule(speeding_id)

        rules = {r.rule_key: r for r in await catalog.list_rules()}
        assert rules["speeding"].points == -5


class TestCustomRules:
    @pytest.mark.asyncio
    async def test_create(self, catalog):
        rule = await _create(catalog)
        assert rule.id is not None
        assert rule.is_default is False
        assert rule.is_active is True
        assert rule.trigger_condition == {"minutes_late": 30}

    @pytest.mark.asyncio
    async def test_duplicate_key(self, catalog):
        await _create(catalog)
        with pytest.raises(DuplicateRuleKeyError):
            await _create(catalog, rule_name="Another")

    @pytest.mark.asyncio
    async def test_duplicate_of_default_key(self, catalog):
        await catalog.seed_default_rules()
        with pytest.raises(DuplicateRuleKeyError):
            await _create(catalog, rule_key="speeding")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"rule_key": ""},
            {"rule_name": ""},
            {"category": None},
            {"points": None},
            {"points": "-5"},
        ],
    )
    async def test_create_rejects_invalid_data(self, catalog, overrides):
        with pytest.raises(InvalidScoringDataError):
            await _create(catalog, **overrides)
        assert await catalog.list_rules() == []

    @pytest.mark.asyncio
    async def test_merge_patch_keeps_omitted_fields(self, catalog):
        rule = await _create(catalog)

        updated = await catalog.update_custom_rule(
            rule.id, {"points": -8, "description": None}
        )

        assert updated.points == -8
        assert updated.rule_name == "Late Delivery"
        assert updated.description == "Delivery window missed"
        assert updated.category == "Compliance"
        assert updated.trigger_condition == {"minutes_late": 30}

    @pytest.mark.asyncio
    async def test_deactivate(self, catalog):
        rule = await _create(catalog)
        updated = await catalog.update_custom_rule(rule.id, {"is_active": False})
        assert updated.is_active is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields",
        [
            {"rule_key": "renamed"},
            {"is_default": True},
            {"rule_name": ""},
            {"points": 1.5},
        ],
    )
    async def test_update_rejects_invalid_fields(self, catalog, fields):
        rule = await _create(catalog)
        with pytest.raises(InvalidScoringDataError):
            await catalog.update_custom_rule(rule.id, fields)

    @pytest.mark.asyncio
    async def test_update_unknown_rule(self, catalog):
        with pytest.raises(RuleNotFoundError):
            await catalog.update_custom_rule(999, {"points": 1})

    @pytest.mark.asyncio
    async def test_delete_keeps_history(self, catalog, ledger, db_session):
        rule = await _create(catalog)
        rule_id = rule.id
        await ledger.apply_custom_rule("late_delivery", "driver-1", "mgr-1")

        await catalog.delete_custom_rule(rule_id)

        assert await catalog.list_rules() == []
        assert await RuleApplicationRepository(db_session).get(rule_id, "driver-1") is None
        events = await EventRepository(db_session).recent_for_driver("driver-1")
        assert len(events) == 1
        assert events[0].rule_id == rule_id
        assert (await ledger.get_score("driver-1"))["current_score"] == -5

    @pytest.mark.asyncio
    async def test_delete_unknown_rule(self, catalog):
        with pytest.raises(RuleNotFoundError):
            await catalog.delete_custom_rule(999)

    @pytest.mark.asyncio
    async def test_list_orders_by_category_then_name(self, catalog):
        await _create(catalog, rule_key="b", rule_name="Zebra", category="Compliance")
        await _create(catalog, rule_key="a", rule_name="Alpha", category="Compliance")
        await _create(catalog, rule_key="c", rule_name="Mid", category="Achievement")

        rules = await catalog.list_rules()
        assert [r.rule_key for r in rules] == ["c", "a", "b"]

    def test_listing_order_is_indexed(self):
        indexes = {ix.name: ix for ix in ScoringRule.__table__.indexes}
        index = indexes["ix_scoring_rules_category_name"]
        assert [c.name for c in index.columns] == ["category", "rule_name"]
