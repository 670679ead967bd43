from fastapi import APIRouter

from app.api.v1.endpoints import rules, scoring, drivers, leaderboard, health

router = APIRouter(prefix="/api/v1")

router.include_router(rules.router)
router.include_router(scoring.router)
router.include_router(drivers.router)
router.include_router(leaderboard.router)
router.include_router(health.router)
