"""
Centralized HTTP exceptions for consistent error handling.

Three failure families reach clients:
- ValidationError (400): malformed or constraint-violating input, never retried
- NotFoundError (404): referenced order/table/catalog row does not exist
- PersistenceError (500): the transaction could not commit; nothing was stored

Usage:
    from shared.utils.exceptions import NotFoundError, ValidationError

    raise NotFoundError("Order", order_id)
    raise ValidationError("Order must contain at least one line")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Order", 123)
        raise NotFoundError("Table", table_id, operation="close_table")
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class OrderNotFoundError(NotFoundError):
    """Order not found."""

    def __init__(self, order_id: int | None = None, **log_context: Any):
        super().__init__("Order", order_id, **log_context)


class TableNotFoundError(NotFoundError):
    """Dining table not found."""

    def __init__(self, table_id: int | None = None, **log_context: Any):
        super().__init__("Table", table_id, **log_context)


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Quantity must be at least 1", field="quantity", value=0)
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InvalidTransitionError(ValidationError):
    """Invalid status transition."""

    def __init__(self, entity: str, from_status: str, to_status: str, **log_context: Any):
        detail = f"Invalid transition from '{from_status}' to '{to_status}' for {entity}"
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(detail, entity=entity, from_status=from_status, to_status=to_status, **log_context)


class DuplicateEntityError(ValidationError):
    """Entity already exists."""

    def __init__(self, entity: str, identifier: str | None = None, **log_context: Any):
        if identifier:
            detail = f"{entity} with identifier '{identifier}' already exists"
        else:
            detail = f"{entity} already exists"

        super().__init__(detail, entity=entity, identifier=identifier, **log_context)


class TotalMismatchError(ValidationError):
    """Client-computed total disagrees with the catalog prices."""

    def __init__(self, expected: Any, received: Any, **log_context: Any):
        detail = (
            f"Order total {received} does not match current prices ({expected}). "
            "Refresh the menu and try again."
        )
        super().__init__(detail, expected=str(expected), received=str(received), **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to build sales report", day="2024-01-01")
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class PersistenceError(InternalError):
    """
    Database transaction failed to commit.

    The caller may retry the whole operation. Order creation has no dedup key,
    so a retried submission can create a duplicate order.
    """

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}. Nothing was saved, please try again."
        self.operation = operation
        super().__init__(detail, operation=operation, **log_context)

