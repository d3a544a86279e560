"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class and shared column types
- catalog: MenuItem, AddOn
- staff: Employee
- table: DiningTable
- order: Order, OrderLine, OrderLineAddOn
"""

# Base classes
from .base import Base, IdentityType, MoneyType

# Catalog (menu)
from .catalog import MenuItem, AddOn

# Staff
from .staff import Employee

# Tables
from .table import DiningTable

# Orders
from .order import Order, OrderLine, OrderLineAddOn


__all__ = [
    # Base
    "Base",
    "IdentityType",
    "MoneyType",
    # Catalog
    "MenuItem",
    "AddOn",
    # Staff
    "Employee",
    # Tables
    "DiningTable",
    # Orders
    "Order",
    "OrderLine",
    "OrderLineAddOn",
]
