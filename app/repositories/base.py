import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import Table
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import RETRYABLE_SQLSTATES
from app.core.exceptions import ScoreConflictError, StoreUnavailableError

logger = logging.getLogger(__name__)


class BaseRepository:
    """Thin base class that holds the database session.

    Every concrete repository receives an ``AsyncSession`` at
    construction time so that multiple repositories can share the same
    unit-of-work within a single request.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """Run the enclosed block as one all-or-nothing unit of work.

        Commits when the block exits normally.  On any exception,
        including task cancellation, the session is rolled back first so
        no partial state survives, then storage errors are translated:

        * ``IntegrityError`` and PostgreSQL serialization / deadlock
          failures become :class:`ScoreConflictError` (retry the call).
        * Any other DBAPI error becomes :class:`StoreUnavailableError`.

        Domain errors raised inside the block propagate unchanged.
        """
        try:
            yield
            await self._db.commit()
        except IntegrityError as exc:
            await self._db.rollback()
            logger.warning("Constraint violation, transaction rolled back: %s", exc.orig)
            raise ScoreConflictError() from exc
        except DBAPIError as exc:
            await self._db.rollback()
            if getattr(exc.orig, "sqlstate", None) in RETRYABLE_SQLSTATES:
                logger.warning("Transaction conflict, rolled back: %s", exc.orig)
                raise ScoreConflictError() from exc
            logger.error("Database failure, transaction rolled back: %s", exc.orig)
            raise StoreUnavailableError() from exc
        except BaseException:
            await self._db.rollback()
            raise

    def _insert(self, table: Table):
        """Return a dialect-specific INSERT supporting ``ON CONFLICT``."""
        if self._db.get_bind().dialect.name == "postgresql":
            return postgresql.insert(table)
        return sqlite.insert(table)
