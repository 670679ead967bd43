from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import logging

from app.api.v1.router import router as api_v1_router
from app.core.exceptions import (
    DriverNotFoundError,
    DuplicateRuleKeyError,
    InvalidScoringDataError,
    RuleNotFoundError,
    ScoreConflictError,
    StoreUnavailableError,
)
from app.core.config import settings as app_settings
from app.core.rate_limit import limiter

# Configure logging
logging.basicConfig(level=app_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Driver Scoring Ledger",
    description="Behavioral scoring for fleet drivers: rules, event ledger, "
    "running scores, resets and leaderboard",
    version="0.1.0",
)

# Attach rate limiter state so slowapi middleware can find it
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware, restricted to configured origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in app_settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router)


def _error(status_code: int, detail: str, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "detail": detail, "type": error_type},
    )


@app.exception_handler(RuleNotFoundError)
async def rule_not_found_handler(request: Request, exc: RuleNotFoundError):
    logger.warning("Rule not found: %s", exc.detail)
    return _error(404, exc.detail, "rule_not_found")


@app.exception_handler(DriverNotFoundError)
async def driver_not_found_handler(request: Request, exc: DriverNotFoundError):
    logger.warning("Driver not found: %s", exc.detail)
    return _error(404, exc.detail, "driver_not_found")


@app.exception_handler(DuplicateRuleKeyError)
async def duplicate_rule_key_handler(request: Request, exc: DuplicateRuleKeyError):
    logger.warning("Duplicate rule key: %s", exc.detail)
    return _error(409, exc.detail, "duplicate_rule_key")


@app.exception_handler(ScoreConflictError)
async def score_conflict_handler(request: Request, exc: ScoreConflictError):
    logger.warning("Score conflict: %s", exc.detail)
    return _error(409, exc.detail, "conflict")


@app.exception_handler(InvalidScoringDataError)
async def invalid_scoring_data_handler(
    request: Request, exc: InvalidScoringDataError
):
    logger.warning("Invalid scoring data: %s", exc.detail)
    return _error(422, exc.detail, "invalid_scoring_data")


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error("Score store unavailable: %s", exc.detail)
    return _error(503, exc.detail, "store_unavailable")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Request validation error: %s", exc.errors())
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "detail": "Request validation failed",
            "errors": exc.errors(),
            "type": "validation_error",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unexpected/unhandled exceptions.

    Returns a generic 500 response so that raw stack traces are never
    leaked to the client.
    """
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "detail": "An unexpected internal error occurred. Please try again later.",
            "type": "internal_server_error",
        },
    )
