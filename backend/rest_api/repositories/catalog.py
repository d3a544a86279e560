"""
Catalog Repositories - Data access for menu items, add-ons and employees.

Thin CRUD. The only non-trivial query is the batch price lookup used when an
order is priced.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from rest_api.models import AddOn, Employee, MenuItem
from .base import BaseRepository


class MenuItemRepository(BaseRepository[MenuItem]):
    """Repository for MenuItem entities."""

    entity_name = "Menu item"

    @property
    def model(self) -> type[MenuItem]:
        return MenuItem

    def find_all(self, category: str | None = None) -> Sequence[MenuItem]:
        query: Select = select(MenuItem).order_by(MenuItem.category, MenuItem.name, MenuItem.id)
        if category:
            query = query.where(MenuItem.category == category)
        return self._db.execute(query).scalars().all()

    def prices_by_id(self, item_ids: Iterable[int]) -> dict[int, Decimal]:
        """Current catalog price for each requested id that exists."""
        ids = set(item_ids)
        if not ids:
            return {}
        rows = self._db.execute(
            select(MenuItem.id, MenuItem.price).where(MenuItem.id.in_(ids))
        ).all()
        return {row.id: row.price for row in rows}


class AddOnRepository(BaseRepository[AddOn]):
    """Repository for AddOn entities."""

    entity_name = "Add-on"

    @property
    def model(self) -> type[AddOn]:
        return AddOn

    def _base_query(self) -> Select:
        return select(AddOn).order_by(AddOn.name, AddOn.id)

    def prices_by_id(self, addon_ids: Iterable[int]) -> dict[int, Decimal]:
        """Current catalog price for each requested id that exists."""
        ids = set(addon_ids)
        if not ids:
            return {}
        rows = self._db.execute(
            select(AddOn.id, AddOn.price).where(AddOn.id.in_(ids))
        ).all()
        return {row.id: row.price for row in rows}


class EmployeeRepository(BaseRepository[Employee]):
    """Repository for Employee entities."""

    entity_name = "Employee"

    @property
    def model(self) -> type[Employee]:
        return Employee

    def _base_query(self) -> Select:
        return select(Employee).order_by(Employee.name, Employee.id)


def get_menu_item_repository(db: Session) -> MenuItemRepository:
    return MenuItemRepository(db)


def get_addon_repository(db: Session) -> AddOnRepository:
    return AddOnRepository(db)


def get_employee_repository(db: Session) -> EmployeeRepository:
    return EmployeeRepository(db)
