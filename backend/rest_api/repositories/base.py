"""
Base Repository implementation.
Provides common data access patterns and commit handling.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import NotFoundError, PersistenceError


ModelT = TypeVar("ModelT")


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: Return the SQLAlchemy model class
    - entity_name: Human readable name used in NotFoundError
    """

    entity_name: str = "Entity"

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    def _base_query(self) -> Select:
        """
        Return base query with proper eager loading.
        Subclasses override this with selectinload/joinedload where needed.
        """
        return select(self.model).order_by(self.model.id)

    def find_all(self) -> Sequence[ModelT]:
        """Find all entities in the base query order."""
        return self._db.execute(self._base_query()).scalars().unique().all()

    def find_by_id(self, entity_id: int) -> ModelT | None:
        """Find entity by ID, or None."""
        query = self._base_query().where(self.model.id == entity_id)
        return self._db.scalar(query)

    def get_or_raise(self, entity_id: int) -> ModelT:
        """Find entity by ID or raise NotFoundError."""
        entity = self.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity

    def exists(self, entity_id: int) -> bool:
        """Cheap existence check without eager loading."""
        return self._db.scalar(
            select(self.model.id).where(self.model.id == entity_id)
        ) is not None

    def create(self, **values: Any) -> ModelT:
        """Insert a new entity and commit."""
        entity = self.model(**values)
        self._db.add(entity)
        self._commit("create", entity=self.entity_name)
        self._db.refresh(entity)
        return entity

    def update(self, entity_id: int, **values: Any) -> ModelT:
        """Apply the given column values to an existing entity and commit."""
        entity = self.get_or_raise(entity_id)
        for key, value in values.items():
            setattr(entity, key, value)
        self._commit("update", entity=self.entity_name, entity_id=entity_id)
        self._db.refresh(entity)
        return entity

    def delete(self, entity_id: int) -> None:
        """Hard delete an entity. Referenced rows fail with PersistenceError."""
        entity = self.get_or_raise(entity_id)
        self._db.delete(entity)
        self._commit("delete", entity=self.entity_name, entity_id=entity_id)

    def _commit(self, operation: str, **log_context: Any) -> None:
        """
        Commit the unit of work.

        Any database failure rolls the whole transaction back and surfaces
        as PersistenceError. Nothing from the failed unit is visible afterwards.
        """
        try:
            safe_commit(self._db)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                operation,
                error_type=type(exc).__name__,
                error=str(exc.orig) if getattr(exc, "orig", None) else str(exc),
                **log_context,
            ) from exc
