"""
Utilities module: Exceptions, money helpers, schemas.
"""

from shared.utils.exceptions import (
    NotFoundError,
    ValidationError,
    PersistenceError,
)
from shared.utils.money import to_money, line_total, order_total
from shared.utils.schemas import SuccessResponse

__all__ = [
    # exceptions
    "NotFoundError",
    "ValidationError",
    "PersistenceError",
    # money
    "to_money",
    "line_total",
    "order_total",
    # schemas
    "SuccessResponse",
]
