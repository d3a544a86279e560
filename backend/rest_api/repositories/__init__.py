"""
Repository Pattern implementation.
Centralizes data access with guaranteed eager loading.

Usage:
    from rest_api.repositories import OrderRepository, get_order_repository

    repo = get_order_repository(db)
    orders = repo.list_open_orders_for_table(table_id=4)
    repo.close_table(table_id=4)
"""

from .base import BaseRepository
from .order import (
    AddOnDraft,
    CreatedOrder,
    OrderLineDraft,
    OrderRepository,
    get_order_repository,
)
from .table import TableRepository, TableWithStatus, get_table_repository
from .catalog import (
    AddOnRepository,
    EmployeeRepository,
    MenuItemRepository,
    get_addon_repository,
    get_employee_repository,
    get_menu_item_repository,
)

__all__ = [
    # Base
    "BaseRepository",
    # Order
    "OrderRepository",
    "OrderLineDraft",
    "AddOnDraft",
    "CreatedOrder",
    "get_order_repository",
    # Table
    "TableRepository",
    "TableWithStatus",
    "get_table_repository",
    # Catalog
    "MenuItemRepository",
    "AddOnRepository",
    "EmployeeRepository",
    "get_menu_item_repository",
    "get_addon_repository",
    "get_employee_repository",
]
