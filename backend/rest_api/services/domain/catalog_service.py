"""
Catalog Domain Service.
Menu items, add-ons and employees for the back office. Plain CRUD.
"""

from sqlalchemy.orm import Session

from rest_api.repositories import (
    get_addon_repository,
    get_employee_repository,
    get_menu_item_repository,
)
from shared.config.logging import get_logger
from shared.utils.schemas import (
    AddOnCreate,
    AddOnOutput,
    AddOnUpdate,
    EmployeeCreate,
    EmployeeOutput,
    MenuItemCreate,
    MenuItemOutput,
    MenuItemUpdate,
)

logger = get_logger(__name__)


class CatalogService:
    """Domain service for catalog and staff administration."""

    def __init__(self, db: Session):
        self._db = db
        self._items = get_menu_item_repository(db)
        self._addons = get_addon_repository(db)
        self._employees = get_employee_repository(db)

    # Menu items

    def list_items(self, category: str | None = None) -> list[MenuItemOutput]:
        return [MenuItemOutput.model_validate(i) for i in self._items.find_all(category)]

    def get_item(self, item_id: int) -> MenuItemOutput:
        return MenuItemOutput.model_validate(self._items.get_or_raise(item_id))

    def create_item(self, data: MenuItemCreate) -> MenuItemOutput:
        item = self._items.create(**data.model_dump())
        logger.info("Menu item created", item_id=item.id, name=item.name)
        return MenuItemOutput.model_validate(item)

    def update_item(self, item_id: int, data: MenuItemUpdate) -> MenuItemOutput:
        item = self._items.update(item_id, **data.model_dump(exclude_unset=True))
        logger.info("Menu item updated", item_id=item_id)
        return MenuItemOutput.model_validate(item)

    def delete_item(self, item_id: int) -> None:
        self._items.delete(item_id)
        logger.info("Menu item deleted", item_id=item_id)

    # Add-ons

    def list_addons(self) -> list[AddOnOutput]:
        return [AddOnOutput.model_validate(a) for a in self._addons.find_all()]

    def create_addon(self, data: AddOnCreate) -> AddOnOutput:
        addon = self._addons.create(**data.model_dump())
        logger.info("Add-on created", addon_id=addon.id, name=addon.name)
        return AddOnOutput.model_validate(addon)

    def update_addon(self, addon_id: int, data: AddOnUpdate) -> AddOnOutput:
        addon = self._addons.update(addon_id, **data.model_dump(exclude_unset=True))
        logger.info("Add-on updated", addon_id=addon_id)
        return AddOnOutput.model_validate(addon)

    def delete_addon(self, addon_id: int) -> None:
        self._addons.delete(addon_id)
        logger.info("Add-on deleted", addon_id=addon_id)

    # Employees

    def list_employees(self) -> list[EmployeeOutput]:
        return [EmployeeOutput.model_validate(e) for e in self._employees.find_all()]

    def create_employee(self, data: EmployeeCreate) -> EmployeeOutput:
        employee = self._employees.create(**data.model_dump())
        logger.info("Employee created", employee_id=employee.id, role=employee.role)
        return EmployeeOutput.model_validate(employee)
