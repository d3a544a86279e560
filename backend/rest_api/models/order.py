"""
Order Models: Order, OrderLine, OrderLineAddOn.

An order is written together with all of its lines and line add-ons in one
transaction and is never partially visible. Lines and add-ons live and die
with their parent.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import OrderStatus
from .base import Base, IdentityType, MoneyType

if TYPE_CHECKING:
    from .catalog import AddOn, MenuItem
    from .table import DiningTable


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(Base):
    """
    A customer order, placed from a table or from the counter (table_id NULL).

    total_price is computed once at creation from the price snapshots of its
    lines and is never recomputed from the current catalog.
    """

    # "order" is a reserved SQL keyword
    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(IdentityType, primary_key=True, autoincrement=True)
    table_id: Mapped[Optional[int]] = mapped_column(
        IdentityType, ForeignKey("dining_table.id"), nullable=True, index=True
    )
    total_price: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    status: Mapped[str] = mapped_column(
        Text, default=OrderStatus.PENDING, nullable=False, index=True
    )  # pending, preparing, ready, delivered, paid
    # Server-assigned, immutable. Python-side default keeps sub-second ordering on SQLite.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False, index=True
    )

    table: Mapped[Optional["DiningTable"]] = relationship(back_populates="orders")
    lines: Mapped[list["OrderLine"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderLine.id",
    )

    __table_args__ = (
        CheckConstraint("total_price >= 0", name="chk_order_total_non_negative"),
        # Open orders per table (occupancy, close table)
        Index("ix_order_table_status", "table_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, table_id={self.table_id}, status='{self.status}', total={self.total_price})>"


class OrderLine(Base):
    """
    A single item within an order.
    Stores the price at the time of order for historical accuracy.
    """

    __tablename__ = "order_line"

    id: Mapped[int] = mapped_column(IdentityType, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        IdentityType, ForeignKey("customer_order.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id: Mapped[int] = mapped_column(
        IdentityType, ForeignKey("menu_item.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_at_time: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    observation: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_line_quantity_positive"),
        CheckConstraint("price_at_time >= 0", name="chk_order_line_price_non_negative"),
    )

    order: Mapped["Order"] = relationship(back_populates="lines")
    item: Mapped["MenuItem"] = relationship()
    addons: Mapped[list["OrderLineAddOn"]] = relationship(
        back_populates="line",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderLineAddOn.id",
    )


class OrderLineAddOn(Base):
    """An add-on selected for one order line, with its price snapshot."""

    __tablename__ = "order_line_addon"

    id: Mapped[int] = mapped_column(IdentityType, primary_key=True, autoincrement=True)
    order_line_id: Mapped[int] = mapped_column(
        IdentityType, ForeignKey("order_line.id", ondelete="CASCADE"), nullable=False, index=True
    )
    addon_id: Mapped[int] = mapped_column(
        IdentityType, ForeignKey("addon.id"), nullable=False, index=True
    )
    price_at_time: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

    __table_args__ = (
        CheckConstraint("price_at_time >= 0", name="chk_order_line_addon_price_non_negative"),
    )

    line: Mapped["OrderLine"] = relationship(back_populates="addons")
    addon: Mapped["AddOn"] = relationship()
