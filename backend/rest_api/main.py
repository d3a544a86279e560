"""
REST API main application.
Entry point for the FastAPI server: REST routes under /api and the shared
real-time channel at /ws, served by the same process so they share one hub.
"""

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from shared.config.settings import settings
from shared.rate_limit import limiter, rate_limit_exceeded_handler
from rest_api.core.lifespan import lifespan
from rest_api.core.cors import configure_cors
from rest_api.core.middlewares import register_middlewares
from rest_api.routers.orders import router as orders_router
from rest_api.routers.tables import router as tables_router
from rest_api.routers.catalog import router as catalog_router
from rest_api.routers.staff import router as staff_router
from rest_api.routers.stats import router as stats_router
from rest_api.routers.public import health_router
from ws_gateway.routes import router as realtime_router


# Create FastAPI application
app = FastAPI(
    title="Comanda REST API",
    description="Restaurant ordering, kitchen and back-office API",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

register_middlewares(app)
configure_cors(app)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(orders_router)
app.include_router(tables_router)
app.include_router(catalog_router)
app.include_router(staff_router)
app.include_router(stats_router)
app.include_router(realtime_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rest_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
