"""
Tests for the order service's write-then-announce sequencing.
Repository calls are replaced with plain functions; the hub is real.
"""

import asyncio
import time
from unittest.mock import AsyncMock, MagicMock

import pytest

from rest_api.services.domain import OrderService
from ws_gateway.notification_hub import NotificationHub


def _recording_connection(received: list) -> MagicMock:
    conn = MagicMock()

    async def record(event):
        received.append((event["type"], event["id"]))

    conn.send_json = AsyncMock(side_effect=record)
    conn.close = AsyncMock()
    return conn


def _service(hub, update_status) -> OrderService:
    service = OrderService(MagicMock(), hub, strict_transitions=True)
    service._orders = MagicMock()
    service._orders.update_status.side_effect = update_status
    return service


class TestCommitOrder:

    @pytest.mark.asyncio
    async def test_events_follow_commit_order_across_requests(self):
        hub = NotificationHub()
        received = []
        await hub.register(_recording_connection(received))
        commits = []

        def commit_then_linger(order_id, status, strict):
            # Commits at once, then keeps the worker thread busy before returning
            commits.append(order_id)
            time.sleep(0.2)

        def commit_immediately(order_id, status, strict):
            commits.append(order_id)

        first = _service(hub, commit_then_linger)
        second = _service(hub, commit_immediately)

        async def later():
            await asyncio.sleep(0.01)
            await second.update_status(2, "ready")

        await asyncio.gather(first.update_status(1, "preparing"), later())

        assert commits == [1, 2]
        assert [order_id for _, order_id in received] == commits

    @pytest.mark.asyncio
    async def test_close_table_events_are_not_interleaved(self):
        hub = NotificationHub()
        received = []
        await hub.register(_recording_connection(received))

        def close_table(table_id):
            time.sleep(0.05)
            return [10, 11]

        closing = _service(hub, None)
        closing._orders.close_table.side_effect = close_table
        updating = _service(hub, lambda order_id, status, strict: None)

        async def later():
            await asyncio.sleep(0.01)
            await updating.update_status(12, "ready")

        await asyncio.gather(closing.close_table(4), later())

        assert received == [
            ("ORDER_UPDATED", 10),
            ("ORDER_UPDATED", 11),
            ("TABLE_UPDATED", 4),
            ("ORDER_UPDATED", 12),
        ]


class TestPublishFailures:

    @pytest.mark.asyncio
    async def test_broadcast_error_does_not_fail_the_write(self):
        hub = NotificationHub()
        hub.broadcast = AsyncMock(side_effect=RuntimeError("hub down"))
        service = _service(hub, lambda order_id, status, strict: None)

        result = await service.update_status(3, "delivered")

        assert result.success is True
        service._orders.update_status.assert_called_once_with(3, "delivered", True)

    @pytest.mark.asyncio
    async def test_without_hub_writes_still_go_through(self):
        service = _service(None, lambda order_id, status, strict: None)

        result = await service.update_status(3, "ready")

        assert result.success is True
        service._orders.update_status.assert_called_once_with(3, "ready", True)
