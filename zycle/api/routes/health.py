"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from zycle import __version__
from zycle.application.dto.responses import HealthResponse, ProviderHealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Pings the pooled SQLite connection and reports the applied schema
    version. Pending migrations mark the database unavailable.
    """
    from zycle.infrastructure.storage.sqlite import get_pool
    from zycle.infrastructure.storage.sqlite.migrations import get_migration_status

    try:
        pool = await get_pool()
        start = time.time()
        available = await pool.ping()
        latency_ms = (time.time() - start) * 1000

        migrations = await get_migration_status(pool.db_path)
        pending = migrations.get("pending_migrations", [])
        db_status = ProviderHealthResponse(
            name=f"sqlite (schema v{migrations.get('current_version')})",
            available=available and not pending,
            latency_ms=latency_ms,
            error=f"pending migrations: {pending}" if pending else None,
        )
    except Exception as e:
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=False,
            error=str(e),
        )

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
