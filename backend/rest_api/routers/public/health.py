"""
Health check and real-time discovery endpoints.
Provides basic and detailed health status of the service and its dependencies.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text

from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal, engine
from shared.utils.health import health_check_with_timeout, aggregate_health_checks
from shared.utils.schemas import RealtimeInfo
from ws_gateway.notification_hub import NotificationHub
from ws_gateway.routes import REALTIME_PATH, get_notification_hub


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check():
    """
    Basic health check endpoint.
    Returns service status without checking dependencies.
    """
    return {
        "status": "healthy",
        "service": "rest-api",
        "environment": settings.environment,
    }


@health_check_with_timeout(timeout=3.0, component="database")
async def check_database_health() -> dict:
    """Check database connectivity."""
    with SessionLocal() as db:
        db.execute(text("SELECT 1"))
    return {"dialect": engine.dialect.name}


@router.get("/health/detailed")
async def detailed_health_check(
    hub: NotificationHub = Depends(get_notification_hub),
):
    """
    Detailed health check that verifies the database and reports the
    real-time hub. Returns 503 Service Unavailable if the database is down.
    """
    health_results = await aggregate_health_checks([check_database_health()])

    checks = {
        "service": "rest-api",
        "environment": settings.environment,
        "status": health_results["status"],
        "dependencies": health_results["components"],
        "realtime": hub.get_stats(),
    }

    if health_results["status"] != "healthy":
        return JSONResponse(content=checks, status_code=503)

    return checks


@router.get("/realtime/info", response_model=RealtimeInfo)
def realtime_info(
    hub: NotificationHub = Depends(get_notification_hub),
) -> RealtimeInfo:
    """
    Connection contract for real-time clients.

    Clients connect to `path`, refetch their lists right after every
    (re)connect and on every event, and reconnect after a fixed
    `reconnect_delay_ms` when the socket drops. Events are not replayed.
    """
    return RealtimeInfo(
        path=REALTIME_PATH,
        reconnect_delay_ms=settings.ws_reconnect_delay_ms,
        connections=hub.total_connections,
    )
