"""
Order Repository - Data access for orders and their lines.

Owns the atomic multi-table write (order + lines + line add-ons), the
status state machine and table billing. Never talks to the notification
hub: broadcasting is the caller's job once the write has committed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Sequence

from sqlalchemy import Select, select, update
from sqlalchemy.orm import Session, joinedload, selectinload

from rest_api.models import DiningTable, Order, OrderLine, OrderLineAddOn
from shared.config.constants import (
    Limits,
    OrderStatus,
    validate_order_status,
    validate_order_transition,
)
from shared.config.logging import orders_logger as logger
from shared.utils.exceptions import (
    InvalidTransitionError,
    OrderNotFoundError,
    TableNotFoundError,
    ValidationError,
)
from shared.utils.money import order_total, to_money
from .base import BaseRepository


@dataclass
class AddOnDraft:
    """An add-on selection with its price already resolved from the catalog."""

    addon_id: int
    price: Decimal


@dataclass
class OrderLineDraft:
    """One line of an order about to be created, prices already resolved."""

    item_id: int
    quantity: int
    unit_price: Decimal
    observation: str | None = None
    addons: list[AddOnDraft] = field(default_factory=list)


@dataclass
class CreatedOrder:
    """Result of a successful create_order."""

    id: int
    created_at: datetime
    total_price: Decimal


class OrderRepository(BaseRepository[Order]):
    """
    Repository for Order entities.

    Guarantees eager loading of:
    - table
    - lines -> item
    - lines -> addons -> addon
    """

    entity_name = "Order"

    @property
    def model(self) -> type[Order]:
        return Order

    def _base_query(self) -> Select:
        """
        Base query with comprehensive eager loading.
        Prevents N+1 when rendering lines and add-on names.
        """
        return (
            select(Order)
            .options(joinedload(Order.table))
            .options(
                selectinload(Order.lines).joinedload(OrderLine.item)
            )
            .options(
                selectinload(Order.lines)
                .selectinload(OrderLine.addons)
                .joinedload(OrderLineAddOn.addon)
            )
        )

    # =========================================================================
    # Writes
    # =========================================================================

    def create_order(
        self,
        table_id: int | None,
        lines: Sequence[OrderLineDraft],
    ) -> CreatedOrder:
        """
        Create an order with all of its lines and add-ons in one transaction.

        Raises:
            ValidationError: Empty order, bad quantity or negative price (nothing written)
            TableNotFoundError: table_id given but no such table
            PersistenceError: Commit failed; the whole order is rolled back
        """
        self.validate_lines(lines)

        if table_id is not None and self._db.scalar(
            select(DiningTable.id).where(DiningTable.id == table_id)
        ) is None:
            raise TableNotFoundError(table_id, operation="create_order")

        total = order_total(
            (line.unit_price, [a.price for a in line.addons], line.quantity)
            for line in lines
        )

        order = Order(
            table_id=table_id,
            total_price=total,
            status=OrderStatus.PENDING,
        )
        for draft in lines:
            line = OrderLine(
                item_id=draft.item_id,
                quantity=draft.quantity,
                price_at_time=to_money(draft.unit_price),
                observation=draft.observation,
            )
            line.addons = [
                OrderLineAddOn(addon_id=a.addon_id, price_at_time=to_money(a.price))
                for a in draft.addons
            ]
            order.lines.append(line)

        self._db.add(order)
        self._commit("create_order", table_id=table_id, lines_count=len(lines))

        result = CreatedOrder(id=order.id, created_at=order.created_at, total_price=order.total_price)
        logger.info(
            "Order created",
            order_id=result.id,
            table_id=table_id,
            lines_count=len(lines),
            total_price=str(result.total_price),
        )
        return result

    def update_status(self, order_id: int, new_status: str, strict: bool = True) -> tuple[Order, str]:
        """
        Move an order to a new status.

        In strict mode only single forward steps (or re-writing the current
        status) are accepted. Lenient mode accepts any known status.

        Returns (order, previous_status).

        Raises:
            ValidationError: Unknown status string
            InvalidTransitionError: Strict mode and the jump is not allowed
            OrderNotFoundError: No such order
        """
        if not validate_order_status(new_status):
            raise ValidationError(
                f"Unknown order status '{new_status}'. Allowed: {', '.join(OrderStatus.ALL)}",
                field="status",
                value=new_status,
            )

        # Row lock serializes concurrent updates of the same order (no-op on SQLite)
        order = self._db.scalar(
            select(Order).where(Order.id == order_id).with_for_update()
        )
        if order is None:
            raise OrderNotFoundError(order_id, operation="update_status")

        previous = order.status
        if strict and not validate_order_transition(previous, new_status):
            self._db.rollback()
            raise InvalidTransitionError("Order", previous, new_status, order_id=order_id)

        order.status = new_status
        self._commit("update_status", order_id=order_id, to_status=new_status)

        logger.info(
            "Order status changed",
            order_id=order_id,
            from_status=previous,
            to_status=new_status,
        )
        return order, previous

    def close_table(self, table_id: int) -> list[int]:
        """
        Bill a table: every non-paid order of the table becomes paid, atomically.

        Closing a table without open orders is a no-op, not an error.
        Returns the ids of the orders that were closed.

        Raises:
            TableNotFoundError: No such table
            PersistenceError: Commit failed; no order changed
        """
        self._ensure_table(table_id, "close_table")

        open_ids = list(
            self._db.execute(
                select(Order.id)
                .where(Order.table_id == table_id, Order.status != OrderStatus.PAID)
                .order_by(Order.id)
                .with_for_update()
            ).scalars().all()
        )

        if open_ids:
            self._db.execute(
                update(Order)
                .where(Order.id.in_(open_ids))
                .values(status=OrderStatus.PAID)
            )
        self._commit("close_table", table_id=table_id, orders_count=len(open_ids))

        logger.info("Table closed", table_id=table_id, orders_closed=len(open_ids))
        return open_ids

    def delete_order(self, order_id: int) -> None:
        """Hard delete an order; its lines and line add-ons go with it."""
        order = self._db.scalar(select(Order).where(Order.id == order_id))
        if order is None:
            raise OrderNotFoundError(order_id, operation="delete_order")

        self._db.delete(order)
        self._commit("delete_order", order_id=order_id)
        logger.info("Order deleted", order_id=order_id)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_order(self, order_id: int) -> Order:
        """Single order with lines and add-ons resolved."""
        order = self.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def list_orders(self, status: str | None = None) -> Sequence[Order]:
        """All orders, newest first. Optionally filtered by status."""
        query = self._base_query().order_by(Order.created_at.desc(), Order.id.desc())
        if status:
            query = query.where(Order.status == status)
        return self._db.execute(query).scalars().unique().all()

    def list_open_orders_for_table(self, table_id: int) -> Sequence[Order]:
        """Non-paid orders of a table, oldest first."""
        self._ensure_table(table_id, "list_open_orders_for_table")
        query = (
            self._base_query()
            .where(Order.table_id == table_id, Order.status != OrderStatus.PAID)
            .order_by(Order.created_at.asc(), Order.id.asc())
        )
        return self._db.execute(query).scalars().unique().all()

    def list_kitchen_queue(self) -> Sequence[Order]:
        """Orders the kitchen still has to work on, oldest first."""
        query = (
            self._base_query()
            .where(Order.status.in_(OrderStatus.KITCHEN_VISIBLE))
            .order_by(Order.created_at.asc(), Order.id.asc())
        )
        return self._db.execute(query).scalars().unique().all()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _ensure_table(self, table_id: int, operation: str) -> None:
        if self._db.scalar(select(DiningTable.id).where(DiningTable.id == table_id)) is None:
            raise TableNotFoundError(table_id, operation=operation)

    @staticmethod
    def validate_lines(lines: Sequence[OrderLineDraft]) -> None:
        if not lines:
            raise ValidationError("Order must contain at least one item", field="items")
        if len(lines) > Limits.MAX_LINES_PER_ORDER:
            raise ValidationError(
                f"Order cannot contain more than {Limits.MAX_LINES_PER_ORDER} items",
                field="items",
                value=len(lines),
            )

        for index, line in enumerate(lines):
            if not Limits.MIN_QUANTITY <= line.quantity <= Limits.MAX_QUANTITY:
                raise ValidationError(
                    f"Quantity must be between {Limits.MIN_QUANTITY} and {Limits.MAX_QUANTITY}",
                    field=f"items[{index}].quantity",
                    value=line.quantity,
                )
            if line.unit_price < 0:
                raise ValidationError(
                    "Item price cannot be negative",
                    field=f"items[{index}].price",
                    value=str(line.unit_price),
                )
            if len(line.addons) > Limits.MAX_ADDONS_PER_LINE:
                raise ValidationError(
                    f"An item cannot have more than {Limits.MAX_ADDONS_PER_LINE} add-ons",
                    field=f"items[{index}].addons",
                )
            if any(a.price < 0 for a in line.addons):
                raise ValidationError(
                    "Add-on price cannot be negative",
                    field=f"items[{index}].addons",
                )


def get_order_repository(db: Session) -> OrderRepository:
    """Factory function for dependency injection."""
    return OrderRepository(db)
