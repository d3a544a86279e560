"""
Catalog router.
Menu items and add-ons managed from the back office.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    AddOnCreate,
    AddOnOutput,
    AddOnUpdate,
    ItemCategory,
    MenuItemCreate,
    MenuItemOutput,
    MenuItemUpdate,
    SuccessResponse,
)
from rest_api.services.domain import CatalogService


router = APIRouter(prefix="/api", tags=["catalog"])


# =============================================================================
# Menu items
# =============================================================================


@router.get("/items", response_model=list[MenuItemOutput])
def list_items(
    category: ItemCategory | None = None,
    db: Session = Depends(get_db),
) -> list[MenuItemOutput]:
    return CatalogService(db).list_items(category)


@router.get("/items/{item_id}", response_model=MenuItemOutput)
def get_item(item_id: int, db: Session = Depends(get_db)) -> MenuItemOutput:
    return CatalogService(db).get_item(item_id)


@router.post("/items", response_model=MenuItemOutput, status_code=status.HTTP_201_CREATED)
def create_item(body: MenuItemCreate, db: Session = Depends(get_db)) -> MenuItemOutput:
    return CatalogService(db).create_item(body)


@router.patch("/items/{item_id}", response_model=MenuItemOutput)
def update_item(
    item_id: int,
    body: MenuItemUpdate,
    db: Session = Depends(get_db),
) -> MenuItemOutput:
    """
    Partial update. Price changes only affect future orders: existing
    order lines keep the price they were sold at.
    """
    return CatalogService(db).update_item(item_id, body)


@router.delete("/items/{item_id}", response_model=SuccessResponse)
def delete_item(item_id: int, db: Session = Depends(get_db)) -> SuccessResponse:
    """Items already sold cannot be deleted (500, history is kept)."""
    CatalogService(db).delete_item(item_id)
    return SuccessResponse()


# =============================================================================
# Add-ons
# =============================================================================


@router.get("/addons", response_model=list[AddOnOutput])
def list_addons(db: Session = Depends(get_db)) -> list[AddOnOutput]:
    return CatalogService(db).list_addons()


@router.post("/addons", response_model=AddOnOutput, status_code=status.HTTP_201_CREATED)
def create_addon(body: AddOnCreate, db: Session = Depends(get_db)) -> AddOnOutput:
    return CatalogService(db).create_addon(body)


@router.patch("/addons/{addon_id}", response_model=AddOnOutput)
def update_addon(
    addon_id: int,
    body: AddOnUpdate,
    db: Session = Depends(get_db),
) -> AddOnOutput:
    return CatalogService(db).update_addon(addon_id, body)


@router.delete("/addons/{addon_id}", response_model=SuccessResponse)
def delete_addon(addon_id: int, db: Session = Depends(get_db)) -> SuccessResponse:
    CatalogService(db).delete_addon(addon_id)
    return SuccessResponse()
