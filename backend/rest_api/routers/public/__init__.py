"""
Public routers - No authentication required.
- /api/health - Health check
- /api/realtime/info - Real-time connection contract
"""

from .health import router as health_router

__all__ = ["health_router"]
