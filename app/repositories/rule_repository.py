import logging
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import delete, select

from app.core.constants import SYSTEM_ACTOR
from app.models.rule import ScoringRule
from app.models.rule_application import RuleApplication
from app.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class RuleRepository(BaseRepository):
    """Encapsulates queries against the ``scoring_rules`` table."""

    async def list_all(self) -> List[ScoringRule]:
        """Return every rule ordered by category, then name."""
        result = await self._db.execute(
            select(ScoringRule).order_by(
                ScoringRule.category, ScoringRule.rule_name, ScoringRule.id
            )
        )
        return list(result.scalars().all())

    async def list_defaults(self) -> List[ScoringRule]:
        """Return the system rules ordered by category, then name."""
        result = await self._db.execute(
            select(ScoringRule)
            .where(ScoringRule.is_default.is_(True))
            .order_by(ScoringRule.category, ScoringRule.rule_name)
        )
        return list(result.scalars().all())

    async def get_by_id(self, rule_id: int) -> Optional[ScoringRule]:
        result = await self._db.execute(
            select(ScoringRule).where(ScoringRule.id == rule_id)
        )
        return result.scalar_one_or_none()

    async def get_by_key(self, rule_key: str) -> Optional[ScoringRule]:
        result = await self._db.execute(
            select(ScoringRule).where(ScoringRule.rule_key == rule_key)
        )
        return result.scalar_one_or_none()

    async def get_by_ref(self, rule_ref: Union[int, str]) -> Optional[ScoringRule]:
        """Look a rule up by numeric id or by ``rule_key``.

        Purely numeric references are tried as ids first and fall back to
        the key, so a rule keyed ``"42"`` is still reachable.
        """
        ref = str(rule_ref)
        if ref.isdigit():
            rule = await self.get_by_id(int(ref))
            if rule is not None:
                return rule
        return await self.get_by_key(ref)

    async def get_custom(self, rule_id: int) -> Optional[ScoringRule]:
        """Return a manager-created rule; default rules are never returned."""
        result = await self._db.execute(
            select(ScoringRule).where(
                ScoringRule.id == rule_id, ScoringRule.is_default.is_(False)
            )
        )
        return result.scalar_one_or_none()

    async def get_default(self, rule_key: str) -> Optional[ScoringRule]:
        result = await self._db.execute(
            select(ScoringRule).where(
                ScoringRule.rule_key == rule_key, ScoringRule.is_default.is_(True)
            )
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ScoringRule:
        """Insert a rule and flush so unique violations surface here."""
        rule = ScoringRule(**kwargs)
        self._db.add(rule)
        await self._db.flush()
        return rule

    async def update_fields(
        self, rule: ScoringRule, fields: Dict[str, Any]
    ) -> ScoringRule:
        """Overwrite only the given attributes on *rule*."""
        for name, value in fields.items():
            setattr(rule, name, value)
        await self._db.flush()
        return rule

    async def delete(self, rule: ScoringRule) -> None:
        """Delete a rule together with its application records."""
        await self._db.execute(
            delete(RuleApplication).where(RuleApplication.rule_id == rule.id)
        )
        await self._db.delete(rule)
        await self._db.flush()

    async def seed_defaults(self, rules: List[Dict[str, Any]]) -> int:
        """Insert every default rule whose key is not present yet.

        Existing rows are left untouched so tuned ``points`` survive a
        re-seed.  Returns the number of rules inserted.
        """
        result = await self._db.execute(select(ScoringRule.rule_key))
        existing = set(result.scalars().all())

        inserted = 0
        for rule_data in rules:
            if rule_data["rule_key"] in existing:
                continue
            self._db.add(
                ScoringRule(
                    **rule_data,
                    is_active=True,
                    is_default=True,
                    created_by=SYSTEM_ACTOR,
                )
            )
            inserted += 1
        await self._db.flush()
        if inserted:
            logger.info("Seeded %d default scoring rules", inserted)
        return inserted
