"""
Tables router.
Table registration, derived occupancy, open orders per table and billing.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    CloseTableResponse,
    OrderOutput,
    TableCreateRequest,
    TableOutput,
)
from rest_api.routers.orders import get_order_service
from rest_api.services.domain import OrderService, TableService


router = APIRouter(prefix="/api/tables", tags=["tables"])


@router.get("", response_model=list[TableOutput])
def list_tables(db: Session = Depends(get_db)) -> list[TableOutput]:
    """All tables ordered by number; occupied while any order is unpaid."""
    return TableService(db).list_tables()


@router.post("", response_model=TableOutput, status_code=status.HTTP_201_CREATED)
def create_table(body: TableCreateRequest, db: Session = Depends(get_db)) -> TableOutput:
    return TableService(db).create_table(body.number)


@router.get("/{table_id}", response_model=TableOutput)
def get_table(table_id: int, db: Session = Depends(get_db)) -> TableOutput:
    return TableService(db).get_table(table_id)


@router.get("/{table_id}/orders", response_model=list[OrderOutput])
async def list_table_orders(
    table_id: int,
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    """Open (not yet paid) orders of the table, oldest first."""
    return await service.list_open_orders_for_table(table_id)


@router.post("/{table_id}/close", response_model=CloseTableResponse)
async def close_table(
    table_id: int,
    service: OrderService = Depends(get_order_service),
) -> CloseTableResponse:
    """
    Close the tab: every open order of the table becomes paid at once.

    Closing a table with nothing open succeeds with closed_orders=0.
    """
    return await service.close_table(table_id)
