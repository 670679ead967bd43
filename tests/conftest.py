from typing import TYPE_CHECKING, AsyncGenerator, Callable, Iterable
from unittest.mock import AsyncMock

if TYPE_CHECKING:
    from app.core.cache import CacheService

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.core.rate_limit import limiter
from app.dependencies import get_cache_service
from app.main import app
from app.models import Base, Driver
from app.repositories import (
    DriverRepository,
    EventRepository,
    LeaderboardRepository,
    RuleApplicationRepository,
    RuleRepository,
    ScoreHistoryRepository,
    ScoreRepository,
)
from app.services.leaderboard import LeaderboardService
from app.services.rule_catalog import RuleCatalogService
from app.services.scoring_ledger import ScoringLedger

DRIVERS = [
    ("driver-1", "Ada", "Lovelace"),
    ("driver-2", "Grace", "Hopper"),
    ("driver-3", "Alan", "Turing"),
    ("driver-4", "Edsger", "Dijkstra"),
    ("driver-42", "Douglas", "Adams"),
]


@pytest.fixture(autouse=True)
def disable_rate_limit():
    """Keep slowapi out of the way; limits are per client address."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """In-memory SQLite database with the full schema, one per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            Driver(
                driver_id=driver_id,
                first_name=first_name,
                last_name=last_name,
                email=f"{driver_id}@fleet.test",
            )
            for driver_id, first_name, last_name in DRIVERS
        )
        await session.commit()

    yield factory

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def catalog(db_session) -> RuleCatalogService:
    return RuleCatalogService(RuleRepository(db_session))


@pytest.fixture
def make_ledger(db_session) -> Callable[..., ScoringLedger]:
    """Build a ``ScoringLedger`` on the test session."""

    def _make(cache=None, base_points: int = 0) -> ScoringLedger:
        return ScoringLedger(
            driver_repo=DriverRepository(db_session),
            rule_repo=RuleRepository(db_session),
            event_repo=EventRepository(db_session),
            score_repo=ScoreRepository(db_session),
            application_repo=RuleApplicationRepository(db_session),
            history_repo=ScoreHistoryRepository(db_session),
            cache=cache,
            base_points=base_points,
        )

    return _make


@pytest.fixture
def ledger(make_ledger) -> ScoringLedger:
    return make_ledger()


@pytest.fixture
def leaderboard_service(db_session) -> LeaderboardService:
    return LeaderboardService(LeaderboardRepository(db_session), base_points=0)


@pytest_asyncio.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Yield an ``httpx.AsyncClient`` wired to the app and the test database."""
    from app.core.cache import CacheService

    async def _get_db():
        async with session_factory() as session:
            yield session

    async def _get_cache_service():
        return CacheService(redis_client=None)

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_cache_service] = _get_cache_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Return an ``AsyncMock`` that behaves like ``redis.asyncio.Redis``."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.setex = AsyncMock()
    redis.incr = AsyncMock(return_value=1)
    redis.ping = AsyncMock()
    return redis


@pytest.fixture
def mock_cache(mock_redis) -> "CacheService":
    """Return a ``CacheService`` backed by the mock Redis client."""
    from app.core.cache import CacheService

    return CacheService(redis_client=mock_redis)


@pytest.fixture
def apply_points():
    """Return a helper that logs one generic event per delta."""

    async def _apply(ledger: ScoringLedger, driver_id: str, deltas: Iterable[int]):
        for points in deltas:
            await ledger.log_generic_event(
                driver_id=driver_id,
                category="Test",
                event_name=f"delta {points:+d}",
                points=points,
            )

    return _apply
