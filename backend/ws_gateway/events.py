"""
Real-time event payloads.

Events are a refresh signal, not a state transfer: clients refetch the
relevant list when they receive one. NEW_ORDER carries the full order so the
kitchen panel can show it immediately.

    {"type": "NEW_ORDER", "order": {...}}
    {"type": "ORDER_UPDATED", "id": 12, "status": "ready"}
    {"type": "TABLE_UPDATED", "id": 4}
"""

from typing import Any

from shared.config.constants import EventType
from shared.utils.schemas import OrderOutput


def new_order_event(order: OrderOutput) -> dict[str, Any]:
    return {"type": EventType.NEW_ORDER, "order": order.model_dump(mode="json")}


def order_updated_event(order_id: int, status: str) -> dict[str, Any]:
    return {"type": EventType.ORDER_UPDATED, "id": order_id, "status": status}


def table_updated_event(table_id: int) -> dict[str, Any]:
    return {"type": EventType.TABLE_UPDATED, "id": table_id}
