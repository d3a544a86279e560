"""
Domain Services - Application Layer.

Services contain business logic and orchestrate operations.
They use Repositories for data access and publish real-time events.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from rest_api.services.domain import OrderService

    # In router
    service = OrderService(db, hub)
    created = await service.create_order(body)
"""

from .order_service import OrderService, order_to_output
from .table_service import TableService
from .catalog_service import CatalogService
from .stats_service import StatsService

__all__ = [
    "OrderService",
    "order_to_output",
    "TableService",
    "CatalogService",
    "StatsService",
]
