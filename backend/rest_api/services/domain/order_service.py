"""
Order Domain Service.

Boundary between the HTTP layer and the order repository. Prices orders
from the catalog, delegates writes to OrderRepository and, once a write has
committed, publishes the matching real-time event through the hub.

Repository calls are blocking and run in a worker thread so the event loop
keeps serving other requests and WebSocket traffic.
"""

import asyncio
from contextlib import AbstractAsyncContextManager, nullcontext
from typing import Any, Sequence

from sqlalchemy.orm import Session

from rest_api.models import Order
from rest_api.repositories import (
    AddOnDraft,
    OrderLineDraft,
    OrderRepository,
    get_addon_repository,
    get_menu_item_repository,
    get_order_repository,
)
from shared.config.logging import orders_logger as logger
from shared.config.settings import settings
from shared.utils.exceptions import NotFoundError, TotalMismatchError
from shared.utils.money import order_total, totals_match
from shared.utils.schemas import (
    CloseTableResponse,
    OrderCreateRequest,
    OrderCreatedResponse,
    OrderLineAddOnOutput,
    OrderLineOutput,
    OrderOutput,
    SuccessResponse,
)
from ws_gateway.events import new_order_event, order_updated_event, table_updated_event
from ws_gateway.notification_hub import NotificationHub


def order_to_output(order: Order) -> OrderOutput:
    """Build the display shape of an eagerly loaded order."""
    return OrderOutput(
        id=order.id,
        table_id=order.table_id,
        table_number=order.table.number if order.table else None,
        total_price=order.total_price,
        status=order.status,
        created_at=order.created_at,
        items=[
            OrderLineOutput(
                id=line.id,
                item_id=line.item_id,
                name=line.item.name,
                quantity=line.quantity,
                price_at_time=line.price_at_time,
                observation=line.observation,
                addons=[
                    OrderLineAddOnOutput(
                        id=sel.id,
                        addon_id=sel.addon_id,
                        name=sel.addon.name,
                        price_at_time=sel.price_at_time,
                    )
                    for sel in line.addons
                ],
            )
            for line in order.lines
        ],
    )


class OrderService:
    """
    Domain service for order lifecycle operations.

    The hub is optional so the service can be used from the CLI, where
    there are no connected clients.
    """

    def __init__(
        self,
        db: Session,
        hub: NotificationHub | None = None,
        strict_transitions: bool | None = None,
    ):
        self._db = db
        self._hub = hub
        self._orders = get_order_repository(db)
        self._items = get_menu_item_repository(db)
        self._addons = get_addon_repository(db)
        self._strict = (
            settings.strict_order_transitions if strict_transitions is None else strict_transitions
        )

    # =========================================================================
    # Commands
    # =========================================================================

    async def create_order(self, request: OrderCreateRequest) -> OrderCreatedResponse:
        """
        Price, store and announce a new order.

        Raises:
            ValidationError: Empty order, bad quantity or total mismatch
            NotFoundError: Unknown table, menu item or add-on
            PersistenceError: The transaction could not commit
        """
        async with self._commit_order():
            order = await asyncio.to_thread(self.create_order_sync, request)
            await self._publish(new_order_event(order))
        return OrderCreatedResponse(id=order.id, created_at=order.created_at, total_price=order.total_price)

    def create_order_sync(self, request: OrderCreateRequest) -> OrderOutput:
        drafts = self.build_drafts(request)
        OrderRepository.validate_lines(drafts)

        expected = order_total(
            (d.unit_price, [a.price for a in d.addons], d.quantity) for d in drafts
        )
        if request.total_price is not None and not totals_match(
            expected, request.total_price, settings.order_total_tolerance
        ):
            raise TotalMismatchError(expected, request.total_price, table_id=request.table_id)

        created = self._orders.create_order(request.table_id, drafts)
        return order_to_output(self._orders.get_order(created.id))

    async def update_status(self, order_id: int, status: str) -> SuccessResponse:
        """
        Change an order's status and announce it.

        Raises:
            ValidationError: Unknown status or illegal transition
            OrderNotFoundError: No such order
        """
        async with self._commit_order():
            await asyncio.to_thread(self._orders.update_status, order_id, status, self._strict)
            await self._publish(order_updated_event(order_id, status))
        return SuccessResponse()

    async def close_table(self, table_id: int) -> CloseTableResponse:
        """
        Bill every open order of a table and announce it.

        Each closed order gets an ORDER_UPDATED so kitchen and admin lists drop
        it, followed by one TABLE_UPDATED for the table view.
        """
        async with self._commit_order():
            closed_ids = await asyncio.to_thread(self._orders.close_table, table_id)
            for order_id in closed_ids:
                await self._publish(order_updated_event(order_id, "paid"))
            await self._publish(table_updated_event(table_id))
        return CloseTableResponse(closed_orders=len(closed_ids))

    async def delete_order(self, order_id: int) -> SuccessResponse:
        """Historical cleanup. Not part of the live flow, so nothing is broadcast."""
        await asyncio.to_thread(self._orders.delete_order, order_id)
        return SuccessResponse()

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_orders(self, status: str | None = None) -> list[OrderOutput]:
        return await asyncio.to_thread(self._to_outputs, self._orders.list_orders, status)

    async def list_open_orders_for_table(self, table_id: int) -> list[OrderOutput]:
        return await asyncio.to_thread(self._to_outputs, self._orders.list_open_orders_for_table, table_id)

    async def list_kitchen_queue(self) -> list[OrderOutput]:
        return await asyncio.to_thread(self._to_outputs, self._orders.list_kitchen_queue)

    async def get_order(self, order_id: int) -> OrderOutput:
        order = await asyncio.to_thread(self._orders.get_order, order_id)
        return order_to_output(order)

    # =========================================================================
    # Helpers
    # =========================================================================

    def build_drafts(self, request: OrderCreateRequest) -> list[OrderLineDraft]:
        """
        Resolve current catalog prices for every line and add-on.

        Raises:
            NotFoundError: A menu item or add-on id does not exist
        """
        item_prices = self._items.prices_by_id(line.id for line in request.items)
        addon_prices = self._addons.prices_by_id(
            addon_id for line in request.items for addon_id in line.all_addon_ids()
        )

        drafts = []
        for line in request.items:
            if line.id not in item_prices:
                raise NotFoundError("Menu item", line.id, operation="create_order")
            addons = []
            for addon_id in line.all_addon_ids():
                if addon_id not in addon_prices:
                    raise NotFoundError("Add-on", addon_id, operation="create_order")
                addons.append(AddOnDraft(addon_id=addon_id, price=addon_prices[addon_id]))
            drafts.append(
                OrderLineDraft(
                    item_id=line.id,
                    quantity=line.quantity,
                    unit_price=item_prices[line.id],
                    observation=line.observation,
                    addons=addons,
                )
            )
        return drafts

    @staticmethod
    def _to_outputs(query: Any, *args: Any) -> list[OrderOutput]:
        orders: Sequence[Order] = query(*args)
        return [order_to_output(order) for order in orders]

    def _commit_order(self) -> AbstractAsyncContextManager:
        """
        Serialize write plus broadcast across all requests of this process,
        so events leave the hub in the order their writes committed.
        """
        if self._hub is None:
            return nullcontext()
        return self._hub.commit_order_lock

    async def _publish(self, event: dict[str, Any]) -> None:
        """Broadcast after commit. A failed fan-out never fails the request."""
        if self._hub is None:
            return
        try:
            await self._hub.broadcast(event)
        except Exception as e:
            logger.error("Event broadcast failed", event_type=event.get("type"), error=str(e))
