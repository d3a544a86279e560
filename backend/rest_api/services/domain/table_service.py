"""
Table Domain Service.
"""

from sqlalchemy.orm import Session

from rest_api.repositories import get_table_repository
from shared.config.logging import get_logger
from shared.config.constants import TableStatus
from shared.utils.schemas import TableOutput

logger = get_logger(__name__)


class TableService:
    """Dining table registration and derived occupancy."""

    def __init__(self, db: Session):
        self._db = db
        self._tables = get_table_repository(db)

    def list_tables(self) -> list[TableOutput]:
        return [
            TableOutput(id=t.id, number=t.number, status=t.status)
            for t in self._tables.list_with_status()
        ]

    def get_table(self, table_id: int) -> TableOutput:
        table = self._tables.get_or_raise(table_id)
        return TableOutput(id=table.id, number=table.number, status=self._tables.get_status(table_id))

    def create_table(self, number: int) -> TableOutput:
        """
        Register a new table. New tables have no orders and start available.

        Raises:
            DuplicateEntityError: Number already used
        """
        table = self._tables.create_table(number)
        logger.info("Table created", table_id=table.id, number=number)
        return TableOutput(id=table.id, number=table.number, status=TableStatus.AVAILABLE)
