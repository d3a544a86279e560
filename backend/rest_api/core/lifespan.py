"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI

from shared.infrastructure.db import engine, SessionLocal
from shared.config.settings import settings
from shared.config.logging import setup_logging, rest_api_logger as logger
from rest_api.models import Base
from rest_api.seed import seed
from ws_gateway.notification_hub import NotificationHub, run_heartbeat_cleanup


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    # Initialize logging
    setup_logging()

    # Validate configuration before startup
    config_errors = settings.validate_production_config()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error", error=error)
        raise RuntimeError(
            f"Production configuration errors: {'; '.join(config_errors)}. "
            "Server will not start with insecure configuration."
        )

    # Startup
    logger.info("Starting REST API", port=settings.rest_api_port, env=settings.environment)

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    if settings.seed_demo_data:
        with SessionLocal() as db:
            seed(db)

    # One hub per process, shared by the order service and the /ws endpoint
    hub = NotificationHub(
        max_connections=settings.ws_max_connections,
        heartbeat_timeout=settings.ws_heartbeat_timeout,
    )
    app.state.notification_hub = hub

    cleanup_task = None
    if settings.ws_heartbeat_timeout > 0:
        cleanup_task = asyncio.create_task(
            run_heartbeat_cleanup(hub, settings.ws_cleanup_interval)
        )
        logger.info("Heartbeat cleanup started", timeout=settings.ws_heartbeat_timeout)

    yield

    # Shutdown
    logger.info("Shutting down REST API")

    if cleanup_task is not None:
        cleanup_task.cancel()
        try:
            await cleanup_task
        except asyncio.CancelledError:
            pass

    await hub.shutdown()
    engine.dispose()
    logger.info("Database engine disposed")
