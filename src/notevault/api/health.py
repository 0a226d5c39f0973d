"""Health check API endpoints."""

import time
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from .. import __version__
from ..core.redis_client import RedisClient, get_redis_client
from ..core.schemas.common import HealthCheckResponse
from ..database import get_db_session

router = APIRouter(prefix="/health", tags=["health"])


async def check_database(session: AsyncSession) -> Dict[str, Any]:
    """Check DB connection."""
    try:
        start = time.perf_counter()
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        elapsed = (time.perf_counter() - start) * 1000
        return {"connected": True, "status": "healthy", "response_time_ms": round(elapsed, 2)}
    except Exception as e:
        return {"connected": False, "status": "unhealthy", "error": str(e), "response_time_ms": None}


async def check_redis(redis_client: RedisClient) -> Dict[str, Any]:
    """Check Redis connection. Redis is optional, so a missing one is only degraded."""
    if not redis_client.is_connected:
        return {"connected": False, "status": "degraded", "response_time_ms": None}
    try:
        start = time.perf_counter()
        await redis_client.ping()
        elapsed = (time.perf_counter() - start) * 1000
        return {"connected": True, "status": "healthy", "response_time_ms": round(elapsed, 2)}
    except Exception as e:
        return {"connected": False, "status": "degraded", "error": str(e), "response_time_ms": None}


@router.get("/", response_model=HealthCheckResponse)
async def health_check(
    session: AsyncSession = Depends(get_db_session),
    redis_client: RedisClient = Depends(get_redis_client),
):
    """Get overall system health status."""
    db_health = await check_database(session)
    redis_health = await check_redis(redis_client)

    overall = "healthy"
    if not db_health["connected"]:
        overall = "unhealthy"
    elif not redis_health["connected"]:
        overall = "degraded"

    return HealthCheckResponse(
        status=overall,
        version=__version__,
        checks={"database": db_health, "redis": redis_health},
    )
