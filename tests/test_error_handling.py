from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import DBAPIError, IntegrityError

from app.core.exceptions import (
    DriverNotFoundError,
    DriverScoringError,
    NotFoundError,
    RuleNotFoundError,
    ScoreConflictError,
    StoreUnavailableError,
)
from app.models import ScoringRule
from app.repositories.base import BaseRepository


class _PgError(Exception):
    def __init__(self, sqlstate):
        super().__init__(f"sqlstate {sqlstate}")
        self.sqlstate = sqlstate


def _repo():
    db = AsyncMock()
    return BaseRepository(db), db


class TestAtomicUnitOfWork:
    """``BaseRepository.atomic`` commits or rolls back and maps errors."""

    @pytest.mark.asyncio
    async def test_commits_on_success(self):
        repo, db = _repo()
        async with repo.atomic():
            pass
        db.commit.assert_awaited_once()
        db.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_integrity_error_becomes_conflict(self):
        repo, db = _repo()
        with pytest.raises(ScoreConflictError):
            async with repo.atomic():
                raise IntegrityError("INSERT", {}, Exception("duplicate key"))
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sqlstate", ["40001", "40P01"])
    async def test_serialization_failure_becomes_conflict(self, sqlstate):
        repo, db = _repo()
        with pytest.raises(ScoreConflictError):
            async with repo.atomic():
                raise DBAPIError("UPDATE", {}, _PgError(sqlstate))
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_other_database_error_becomes_unavailable(self):
        repo, db = _repo()
        with pytest.raises(StoreUnavailableError):
            async with repo.atomic():
                raise DBAPIError("SELECT", {}, _PgError("08006"))
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_commit_is_mapped(self):
        repo, db = _repo()
        db.commit = AsyncMock(side_effect=DBAPIError("COMMIT", {}, _PgError("40001")))
        with pytest.raises(ScoreConflictError):
            async with repo.atomic():
                pass
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_domain_errors_propagate_unchanged(self):
        repo, db = _repo()
        with pytest.raises(RuleNotFoundError):
            async with repo.atomic():
                raise RuleNotFoundError()
        db.rollback.assert_awaited_once()


class TestDialectInsert:
    def _repo_for(self, dialect_name):
        db = MagicMock()
        db.get_bind.return_value.dialect.name = dialect_name
        return BaseRepository(db)

    def test_postgresql(self):
        stmt = self._repo_for("postgresql")._insert(ScoringRule.__table__)
        assert isinstance(stmt, postgresql.Insert)

    def test_sqlite(self):
        stmt = self._repo_for("sqlite")._insert(ScoringRule.__table__)
        assert isinstance(stmt, sqlite.Insert)


class TestExceptionHierarchy:
    def test_not_found_errors(self):
        assert issubclass(RuleNotFoundError, NotFoundError)
        assert issubclass(DriverNotFoundError, NotFoundError)

    def test_all_domain_errors_share_a_base(self):
        for exc in (
            RuleNotFoundError,
            DriverNotFoundError,
            ScoreConflictError,
            StoreUnavailableError,
        ):
            assert issubclass(exc, DriverScoringError)
            assert exc().detail

    def test_detail_is_message(self):
        exc = DriverNotFoundError("Driver d-1 not found")
        assert exc.detail == "Driver d-1 not found"
        assert str(exc) == "Driver d-1 not found"
