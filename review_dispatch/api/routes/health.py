"""Health check endpoints."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Response
from sqlalchemy import text

from review_dispatch.db.client import get_db_pool, get_db_session

router = APIRouter()
logger = structlog.get_logger()

_startup_time = datetime.now(timezone.utc)


@router.get("/health")
async def health_check():
    """Process is up; does not touch dependencies."""
    now = datetime.now(timezone.utc)
    return {
        "status": "healthy",
        "service": "review-dispatch",
        "version": "0.1.0",
        "timestamp": now.isoformat(),
        "uptime_seconds": (now - _startup_time).total_seconds(),
    }


@router.get("/ready")
async def readiness_check(response: Response):
    """
    Readiness check.

    Both database paths must answer: the SQLAlchemy session used for
    directory lookups and the asyncpg pool the assignment engine locks rows
    through.
    """
    checks = {"postgres": False, "engine_pool": False}

    try:
        async with get_db_session() as session:
            await session.execute(text("SELECT 1"))
        checks["postgres"] = True
    except Exception as exc:
        logger.warning("PostgreSQL session check failed", error=str(exc))

    try:
        pool = await get_db_pool()
        async with pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
        checks["engine_pool"] = True
    except Exception as exc:
        logger.warning("Engine pool check failed", error=str(exc))

    ready = all(checks.values())
    if not ready:
        response.status_code = 503

    return {
        "status": "ready" if ready else "degraded",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/live")
async def liveness_check():
    return {"status": "alive"}
