"""
Catalog Models: MenuItem, AddOn.

Owned by the menu management screens. Orders only reference these rows by id
and snapshot their prices at order time.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdentityType, MoneyType


class MenuItem(Base):
    """
    A dish or drink on the menu.

    observation_info is an optional prompt shown to customers next to the
    free-text observation field (e.g. "Meat doneness?").
    """

    __tablename__ = "menu_item"

    id: Mapped[int] = mapped_column(IdentityType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False, index=True)  # dish, drink
    is_dish_of_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    observation_info: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_menu_item_price_non_negative"),
        CheckConstraint("category IN ('dish', 'drink')", name="chk_menu_item_category"),
    )

    def __repr__(self) -> str:
        return f"<MenuItem(id={self.id}, name='{self.name}', price={self.price})>"


class AddOn(Base):
    """An extra that can be attached to an order line (extra cheese, bacon...)."""

    __tablename__ = "addon"

    id: Mapped[int] = mapped_column(IdentityType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_addon_price_non_negative"),
    )
