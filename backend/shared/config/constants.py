"""
Centralized constants for the backend application.
Avoids magic strings for statuses, categories and event types.

Usage:
    from shared.config.constants import OrderStatus, ORDER_TRANSITIONS

    if status == OrderStatus.PENDING:
        ...
"""

from typing import Final


# =============================================================================
# Entity Status Constants
# =============================================================================


class OrderStatus:
    """Order status constants."""

    PENDING: Final[str] = "pending"
    PREPARING: Final[str] = "preparing"
    READY: Final[str] = "ready"
    DELIVERED: Final[str] = "delivered"
    PAID: Final[str] = "paid"

    ALL: Final[list[str]] = [PENDING, PREPARING, READY, DELIVERED, PAID]
    # Anything not yet billed keeps its table occupied
    OPEN: Final[list[str]] = [PENDING, PREPARING, READY, DELIVERED]
    KITCHEN_VISIBLE: Final[list[str]] = [PENDING, PREPARING, READY]
    TERMINAL: Final[list[str]] = [PAID]


class TableStatus:
    """Derived dining table status. Never stored."""

    AVAILABLE: Final[str] = "available"
    OCCUPIED: Final[str] = "occupied"


class ItemCategory:
    """Menu item category constants."""

    DISH: Final[str] = "dish"
    DRINK: Final[str] = "drink"

    ALL: Final[list[str]] = [DISH, DRINK]


# =============================================================================
# Status Transitions
# =============================================================================

# Valid order status transitions (from -> [allowed to states])
# pending -> preparing -> ready -> delivered -> paid
# Bulk billing (close table) moves any open order straight to paid and does not
# go through this table.
ORDER_TRANSITIONS: Final[dict[str, list[str]]] = {
    OrderStatus.PENDING: [OrderStatus.PREPARING],
    OrderStatus.PREPARING: [OrderStatus.READY],
    OrderStatus.READY: [OrderStatus.DELIVERED],
    OrderStatus.DELIVERED: [OrderStatus.PAID],
    OrderStatus.PAID: [],  # Terminal state
}


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    MAX_LINES_PER_ORDER: Final[int] = 100
    MAX_ADDONS_PER_LINE: Final[int] = 20

    MAX_NAME_LENGTH: Final[int] = 200
    MAX_DESCRIPTION_LENGTH: Final[int] = 2000
    MAX_OBSERVATION_LENGTH: Final[int] = 500
    MAX_URL_LENGTH: Final[int] = 2048

    # Sales report windows (days)
    WEEKLY_WINDOW_DAYS: Final[int] = 7
    MONTHLY_WINDOW_DAYS: Final[int] = 30


# =============================================================================
# Event Types (WebSocket)
# =============================================================================


class EventType:
    """Real-time event type constants."""

    NEW_ORDER: Final[str] = "NEW_ORDER"
    ORDER_UPDATED: Final[str] = "ORDER_UPDATED"
    TABLE_UPDATED: Final[str] = "TABLE_UPDATED"

    ALL: Final[list[str]] = [NEW_ORDER, ORDER_UPDATED, TABLE_UPDATED]


# =============================================================================
# Status Validation Functions
# =============================================================================


def validate_order_status(status: str) -> bool:
    """Validate that an order status is known."""
    return status in OrderStatus.ALL


def validate_order_transition(current_status: str, new_status: str) -> bool:
    """
    Validate that an order status transition is allowed.

    Re-writing the current status is accepted as a no-op.
    Returns True if transition is valid, False otherwise.
    """
    if current_status == new_status:
        return True
    allowed = ORDER_TRANSITIONS.get(current_status, [])
    return new_status in allowed
