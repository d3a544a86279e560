"""
Table Models: DiningTable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdentityType

if TYPE_CHECKING:
    from .order import Order


class DiningTable(Base):
    """
    Physical table in the restaurant.

    There is no status column: a table is occupied iff it has at least one
    order that is not paid yet. See TableRepository for the derived query.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "dining_table"

    id: Mapped[int] = mapped_column(IdentityType, primary_key=True, autoincrement=True)
    number: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)

    orders: Mapped[list["Order"]] = relationship(back_populates="table")

    def __repr__(self) -> str:
        return f"<DiningTable(id={self.id}, number={self.number})>"
