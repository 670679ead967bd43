import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from app.core.constants import CUSTOM_RULE_MUTABLE_FIELDS
from app.core.default_rules import DEFAULT_RULES
from app.core.exceptions import (
    DuplicateRuleKeyError,
    InvalidScoringDataError,
    RuleNotFoundError,
)
from app.models.rule import ScoringRule
from app.repositories.rule_repository import RuleRepository

logger = logging.getLogger(__name__)


def _require_points(points: Any) -> int:
    if isinstance(points, bool) or not isinstance(points, int):
        raise InvalidScoringDataError("points must be an integer")
    return points


class RuleCatalogService:
    """Manage default (system) and manager-created custom scoring rules.

    Default rules can only have ``points`` and ``is_active`` tuned via
    :meth:`update_default_rule`; every custom-rule operation treats a
    default rule as if it did not exist.
    """

    def __init__(self, rule_repo: RuleRepository) -> None:
        self._rules = rule_repo

    async def list_rules(self) -> List[ScoringRule]:
        return await self._rules.list_all()

    async def get_default_rules(self) -> List[ScoringRule]:
        return await self._rules.list_defaults()

    async def create_custom_rule(
        self,
        *,
        rule_key: str,
        rule_name: str,
        category: str,
        points: int,
        description: Optional[str] = None,
        trigger_condition: Optional[Dict[str, Any]] = None,
        is_active: Optional[bool] = None,
        created_by: Optional[str] = None,
    ) -> ScoringRule:
        """Create a manager rule.

        Raises:
            InvalidScoringDataError: A required field is missing.
            DuplicateRuleKeyError: *rule_key* is already taken.
        """
        missing = [
            name
            for name, value in (
                ("rule_key", rule_key),
                ("rule_name", rule_name),
                ("category", category),
                ("points", points),
            )
            if value is None or value == ""
        ]
        if missing:
            raise InvalidScoringDataError(
                f"Missing required fields: {', '.join(missing)}"
            )
        _require_points(points)

        async with self._rules.atomic():
            if await self._rules.get_by_key(rule_key) is not None:
                raise DuplicateRuleKeyError(f"Rule key '{rule_key}' already exists")
            try:
                rule = await self._rules.create(
                    rule_key=rule_key,
                    rule_name=rule_name,
                    description=description,
                    category=category,
                    points=points,
                    trigger_condition=trigger_condition or {},
                    is_active=True if is_active is None else is_active,
                    is_default=False,
                    created_by=created_by,
                )
            except IntegrityError as exc:
                # Lost a race with a concurrent create of the same key
                raise DuplicateRuleKeyError(
                    f"Rule key '{rule_key}' already exists"
                ) from exc

        logger.info("Custom rule %s created by %s", rule_key, created_by)
        return rule

    async def update_custom_rule(
        self, rule_id: int, fields: Dict[str, Any]
    ) -> ScoringRule:
        """Merge *fields* into a custom rule.

        Only keys present with a non-``None`` value overwrite the stored
        value; everything else is preserved.

        Raises:
            InvalidScoringDataError: An unknown or immutable field was given.
            RuleNotFoundError: No custom rule has that id.
        """
        unknown = set(fields) - CUSTOM_RULE_MUTABLE_FIELDS
        if unknown:
            raise InvalidScoringDataError(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            )
        patch = {name: value for name, value in fields.items() if value is not None}
        if "points" in patch:
            _require_points(patch["points"])
        for name in ("rule_name", "category"):
            if patch.get(name) == "":
                raise InvalidScoringDataError(f"{name} must not be empty")

        async with self._rules.atomic():
            rule = await self._rules.get_custom(rule_id)
            if rule is None:
                raise RuleNotFoundError("Custom rule not found or is system rule")
            await self._rules.update_fields(rule, patch)

        logger.info("Custom rule %s updated (%s)", rule.rule_key, ", ".join(patch))
        return rule

    async def update_default_rule(
        self,
        rule_key: str,
        points: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> ScoringRule:
        """Tune ``points`` and/or ``is_active`` on a system rule."""
        if not rule_key:
            raise InvalidScoringDataError("rule_key is required")
        patch: Dict[str, Any] = {}
        if points is not None:
            patch["points"] = _require_points(points)
        if is_active is not None:
            patch["is_active"] = is_active

        async with self._rules.atomic():
            rule = await self._rules.get_default(rule_key)
            if rule is None:
                raise RuleNotFoundError("System rule not found")
            await self._rules.update_fields(rule, patch)

        logger.info("System rule %s updated (%s)", rule_key, ", ".join(patch))
        return rule

    async def delete_custom_rule(self, rule_id: int) -> None:
        """Delete a custom rule for good.  Its past events are kept."""
        async with self._rules.atomic():
            rule = await self._rules.get_custom(rule_id)
            if rule is None:
                raise RuleNotFoundError("Custom rule not found or is system rule")
            rule_key = rule.rule_key
            await self._rules.delete(rule)

        logger.info("Custom rule %s deleted", rule_key)

    async def seed_default_rules(self) -> int:
        """Insert any default rule that is missing.  Idempotent."""
        async with self._rules.atomic():
            return await self._rules.seed_defaults(DEFAULT_RULES)
