"""
Orders router.
Order submission from the ordering UI, status changes from the kitchen
panel and the order lists used by the dashboards.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.rate_limit import limiter, ORDER_SUBMISSION_LIMIT
from shared.utils.schemas import (
    OrderCreateRequest,
    OrderCreatedResponse,
    OrderOutput,
    SuccessResponse,
    UpdateOrderStatusRequest,
)
from rest_api.services.domain import OrderService
from ws_gateway.notification_hub import NotificationHub
from ws_gateway.routes import get_notification_hub


router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_order_service(
    db: Session = Depends(get_db),
    hub: NotificationHub = Depends(get_notification_hub),
) -> OrderService:
    return OrderService(db, hub)


@router.post("", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(ORDER_SUBMISSION_LIMIT)
async def create_order(
    request: Request,
    response: Response,
    body: OrderCreateRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderCreatedResponse:
    """
    Submit a new order.

    Prices are taken from the current catalog. If total_price is sent and
    does not match, the order is rejected so the client can refresh its menu.
    Every connected client receives NEW_ORDER once the order is stored.

    Retrying after a timeout can create a duplicate order.
    """
    return await service.create_order(body)


@router.get("", response_model=list[OrderOutput])
async def list_orders(
    status: str | None = None,
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    """All orders, newest first, with lines and add-ons."""
    return await service.list_orders(status)


@router.get("/kitchen", response_model=list[OrderOutput])
async def kitchen_queue(
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    """Orders still pending, preparing or ready, oldest first."""
    return await service.list_kitchen_queue()


@router.get("/{order_id}", response_model=OrderOutput)
async def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    return await service.get_order(order_id)


@router.patch("/{order_id}", response_model=SuccessResponse)
async def update_order_status(
    order_id: int,
    body: UpdateOrderStatusRequest,
    service: OrderService = Depends(get_order_service),
) -> SuccessResponse:
    """
    Change the status of an order.

    pending -> preparing -> ready -> delivered -> paid, one step at a time
    unless strict transitions are disabled. Broadcasts ORDER_UPDATED.
    """
    return await service.update_status(order_id, body.status)


@router.delete("/{order_id}", response_model=SuccessResponse)
async def delete_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> SuccessResponse:
    """Hard delete an order with its lines (historical cleanup)."""
    return await service.delete_order(order_id)
