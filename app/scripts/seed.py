"""Sample data seeder: driver registry, default rules, a few scoring events."""

import asyncio

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from app.models import Driver, DriverScore, ScoringEvent
from app.repositories import (
    DriverRepository,
    EventRepository,
    RuleApplicationRepository,
    RuleRepository,
    ScoreHistoryRepository,
    ScoreRepository,
)
from app.services.rule_catalog import RuleCatalogService
from app.services.scoring_ledger import ScoringLedger

SAMPLE_DRIVERS = [
    ("driver-01", "Amina", "Yusuf"),
    ("driver-02", "Carlos", "Mendes"),
    ("driver-03", "Hana", "Kobayashi"),
    ("driver-04", "Liam", "O'Connor"),
    ("driver-05", "Priya", "Raman"),
    ("driver-06", "Tomasz", "Nowak"),
    ("driver-07", "Zanele", "Dlamini"),
    ("driver-08", "Omar", "Haddad"),
]

# (driver_id, rule_key) pairs replayed through the ledger
SAMPLE_APPLICATIONS = [
    ("driver-01", "safe_trip"),
    ("driver-01", "safe_week"),
    ("driver-02", "speeding"),
    ("driver-02", "harsh_braking"),
    ("driver-03", "safe_trip"),
    ("driver-04", "phone_usage"),
    ("driver-05", "safe_trip"),
    ("driver-05", "safe_trip"),
    ("driver-06", "missed_inspection"),
    ("driver-07", "excessive_idling"),
]


async def seed():
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with session_maker() as session:
        print("Seeding driver scoring sample data")

        # Clear existing data to allow re-running the seed.
        await session.execute(
            text(
                "TRUNCATE TABLE "
                "score_history, "
                "rule_applications, "
                "scoring_events, "
                "driver_scores, "
                "scoring_rules, "
                "drivers "
                "RESTART IDENTITY CASCADE"
            )
        )
        await session.commit()
        print("Cleared existing data")

        # 0. Default rules
        inserted = await RuleCatalogService(RuleRepository(session)).seed_default_rules()
        print(f"Created {inserted} default scoring rules")

        # 1. Driver registry
        for driver_id, first_name, last_name in SAMPLE_DRIVERS:
            session.add(
                Driver(
                    driver_id=driver_id,
                    first_name=first_name,
                    last_name=last_name,
                    email=f"{driver_id}@fleet.example.com",
                )
            )
        await session.commit()
        print(f"Created {len(SAMPLE_DRIVERS)} drivers")

        # 2. Scoring events, each through the ledger so aggregates stay exact
        ledger = ScoringLedger(
            driver_repo=DriverRepository(session),
            rule_repo=RuleRepository(session),
            event_repo=EventRepository(session),
            score_repo=ScoreRepository(session),
            application_repo=RuleApplicationRepository(session),
            history_repo=ScoreHistoryRepository(session),
        )
        for driver_id, rule_key in SAMPLE_APPLICATIONS:
            await ledger.apply_custom_rule(rule_key, driver_id, applied_by="seed")
        print(f"Applied {len(SAMPLE_APPLICATIONS)} rules")

        # Validation
        event_cnt = (
            await session.execute(select(func.count()).select_from(ScoringEvent))
        ).scalar()
        score_cnt = (
            await session.execute(select(func.count()).select_from(DriverScore))
        ).scalar()

        print("\nValidation:")
        print(f"  Events: {event_cnt}")
        print(f"  Scored drivers: {score_cnt}")
        for driver_id, _, _ in SAMPLE_DRIVERS:
            check = await ledger.reconcile(driver_id)
            if not check["consistent"]:
                print(f"  DRIFT {driver_id}: {check}")
        print("Seeding complete")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
