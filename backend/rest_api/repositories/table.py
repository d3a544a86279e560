"""
Table Repository - Data access for dining tables.

Table status is derived on read from the table's orders, never stored.
"""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from rest_api.models import DiningTable, Order
from shared.config.constants import OrderStatus, TableStatus
from shared.utils.exceptions import DuplicateEntityError, TableNotFoundError
from .base import BaseRepository


@dataclass
class TableWithStatus:
    """A dining table together with its derived occupancy."""

    id: int
    number: int
    status: str


def _has_open_orders():
    """Correlated EXISTS: the outer DiningTable has at least one non-paid order."""
    return exists().where(
        Order.table_id == DiningTable.id,
        Order.status != OrderStatus.PAID,
    )


class TableRepository(BaseRepository[DiningTable]):
    """Repository for DiningTable entities."""

    entity_name = "Table"

    @property
    def model(self) -> type[DiningTable]:
        return DiningTable

    def _base_query(self):
        return select(DiningTable).order_by(DiningTable.number)

    def get_or_raise(self, entity_id: int) -> DiningTable:
        table = self.find_by_id(entity_id)
        if table is None:
            raise TableNotFoundError(entity_id)
        return table

    def list_with_status(self) -> list[TableWithStatus]:
        """All tables ordered by number, each with its derived status."""
        rows = self._db.execute(
            select(DiningTable.id, DiningTable.number, _has_open_orders().label("occupied"))
            .order_by(DiningTable.number)
        ).all()
        return [
            TableWithStatus(
                id=row.id,
                number=row.number,
                status=TableStatus.OCCUPIED if row.occupied else TableStatus.AVAILABLE,
            )
            for row in rows
        ]

    def get_status(self, table_id: int) -> str:
        """Derived status of one table."""
        self.get_or_raise(table_id)
        occupied = self._db.scalar(
            select(
                exists().where(
                    Order.table_id == table_id,
                    Order.status != OrderStatus.PAID,
                )
            )
        )
        return TableStatus.OCCUPIED if occupied else TableStatus.AVAILABLE

    def find_by_number(self, number: int) -> DiningTable | None:
        return self._db.scalar(select(DiningTable).where(DiningTable.number == number))

    def create_table(self, number: int) -> DiningTable:
        """
        Register a table.

        Raises:
            DuplicateEntityError: A table with this number already exists
        """
        if self.find_by_number(number) is not None:
            raise DuplicateEntityError("Table", str(number), field="number")
        return self.create(number=number)


def get_table_repository(db: Session) -> TableRepository:
    """Factory function for dependency injection."""
    return TableRepository(db)
