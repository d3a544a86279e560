"""
Tests for the in-process notification hub and event payloads.
"""

import asyncio
import time
from decimal import Decimal
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from shared.utils.schemas import OrderOutput
from ws_gateway.events import new_order_event, order_updated_event, table_updated_event
from ws_gateway.notification_hub import NotificationHub, run_heartbeat_cleanup


def _connection(fails: bool = False) -> MagicMock:
    conn = MagicMock()
    conn.send_json = AsyncMock(side_effect=RuntimeError("socket gone") if fails else None)
    conn.close = AsyncMock()
    return conn


class TestMembership:
    """register / unregister."""

    @pytest.mark.asyncio
    async def test_register_and_unregister(self):
        hub = NotificationHub()
        conn = _connection()

        await hub.register(conn)
        assert hub.is_registered(conn)
        assert hub.total_connections == 1

        await hub.unregister(conn)
        assert not hub.is_registered(conn)
        assert hub.total_connections == 0

    @pytest.mark.asyncio
    async def test_unregister_unknown_is_ignored(self):
        hub = NotificationHub()
        await hub.unregister(_connection())
        assert hub.total_connections == 0

    @pytest.mark.asyncio
    async def test_connection_limit(self):
        hub = NotificationHub(max_connections=2)
        await hub.register(_connection())
        await hub.register(_connection())

        with pytest.raises(ConnectionError):
            await hub.register(_connection())

        assert hub.total_connections == 2

    @pytest.mark.asyncio
    async def test_concurrent_registration(self):
        hub = NotificationHub()
        connections = [_connection() for _ in range(50)]

        await asyncio.gather(*(hub.register(c) for c in connections))
        assert hub.total_connections == 50

        await asyncio.gather(*(hub.unregister(c) for c in connections[:20]))
        assert hub.total_connections == 30


class TestBroadcast:
    """Fan-out to every live connection."""

    @pytest.mark.asyncio
    async def test_every_connection_receives_event(self):
        hub = NotificationHub()
        connections = [_connection() for _ in range(3)]
        for conn in connections:
            await hub.register(conn)

        event = order_updated_event(12, "ready")
        sent = await hub.broadcast(event)

        assert sent == 3
        for conn in connections:
            conn.send_json.assert_awaited_once_with(event)

    @pytest.mark.asyncio
    async def test_failing_connection_is_dropped_others_still_receive(self):
        hub = NotificationHub()
        good_a, broken, good_b = _connection(), _connection(fails=True), _connection()
        for conn in (good_a, broken, good_b):
            await hub.register(conn)

        sent = await hub.broadcast(table_updated_event(4))

        assert sent == 2
        good_a.send_json.assert_awaited_once()
        good_b.send_json.assert_awaited_once()
        assert not hub.is_registered(broken)
        assert hub.total_connections == 2
        assert hub.get_stats()["delivery_failures"] == 1

        # The dropped connection is closed in the background so its client reconnects
        await asyncio.sleep(0.01)
        broken.close.assert_awaited_once_with(code=1011, reason="Delivery failed")
        good_a.close.assert_not_awaited()

        # Next broadcast does not try the dropped connection again
        await hub.broadcast(table_updated_event(4))
        assert broken.send_json.await_count == 1

    @pytest.mark.asyncio
    async def test_slow_connection_times_out(self):
        hub = NotificationHub(send_timeout=0.05)
        slow = _connection()

        async def hang(_event):
            await asyncio.sleep(1)

        slow.send_json = AsyncMock(side_effect=hang)
        fast = _connection()
        await hub.register(slow)
        await hub.register(fast)

        sent = await hub.broadcast(order_updated_event(1, "preparing"))

        assert sent == 1
        assert not hub.is_registered(slow)

    @pytest.mark.asyncio
    async def test_stalled_connections_cost_one_timeout_not_one_each(self):
        hub = NotificationHub(send_timeout=0.2)

        async def stall(_event):
            await asyncio.sleep(30)

        stalled = []
        for _ in range(3):
            conn = _connection()
            conn.send_json = AsyncMock(side_effect=stall)
            stalled.append(conn)
            await hub.register(conn)
        fast = _connection()
        await hub.register(fast)

        started = time.monotonic()
        sent = await hub.broadcast(order_updated_event(5, "ready"))
        elapsed = time.monotonic() - started

        assert sent == 1
        assert elapsed < 0.5
        fast.send_json.assert_awaited_once()
        assert hub.total_connections == 1
        for conn in stalled:
            assert not hub.is_registered(conn)

    @pytest.mark.asyncio
    async def test_large_fan_out_is_sent_in_batches(self):
        hub = NotificationHub(batch_size=2)
        connections = [_connection() for _ in range(5)]
        for conn in connections:
            await hub.register(conn)

        assert await hub.broadcast(table_updated_event(2)) == 5
        for conn in connections:
            conn.send_json.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_broadcast_with_no_connections(self):
        hub = NotificationHub()
        assert await hub.broadcast(table_updated_event(1)) == 0

    @pytest.mark.asyncio
    async def test_events_arrive_in_broadcast_order(self):
        hub = NotificationHub()
        received = []
        conn = _connection()

        async def record(event):
            await asyncio.sleep(0)
            received.append(event["id"])

        conn.send_json = AsyncMock(side_effect=record)
        await hub.register(conn)

        await asyncio.gather(*(hub.broadcast(order_updated_event(i, "ready")) for i in range(10)))

        assert received == list(range(10))


class TestHeartbeatAndShutdown:

    @pytest.mark.asyncio
    async def test_stale_connections_are_closed(self):
        hub = NotificationHub(heartbeat_timeout=60)
        stale, fresh = _connection(), _connection()
        await hub.register(stale)
        await hub.register(fresh)
        hub._last_heartbeat[stale] = time.time() - 120

        cleaned = await hub.cleanup_stale_connections()

        assert cleaned == 1
        stale.close.assert_awaited_once()
        assert not hub.is_registered(stale)
        assert hub.is_registered(fresh)

    @pytest.mark.asyncio
    async def test_heartbeat_disabled_never_sweeps(self):
        hub = NotificationHub(heartbeat_timeout=0)
        conn = _connection()
        await hub.register(conn)
        hub._last_heartbeat[conn] = 0

        assert hub.get_stale_connections() == []

    @pytest.mark.asyncio
    async def test_cleanup_loop_stops_when_cancelled(self):
        hub = NotificationHub(heartbeat_timeout=60)
        task = asyncio.create_task(run_heartbeat_cleanup(hub, interval=0.01))
        await asyncio.sleep(0.05)

        task.cancel()
        await asyncio.wait_for(task, timeout=1)

        assert task.done()

    @pytest.mark.asyncio
    async def test_shutdown_closes_all_and_rejects_new(self):
        hub = NotificationHub()
        connections = [_connection() for _ in range(3)]
        for conn in connections:
            await hub.register(conn)

        closed = await hub.shutdown()

        assert closed == 3
        assert hub.total_connections == 0
        assert hub.is_shutting_down()
        for conn in connections:
            conn.close.assert_awaited_once_with(code=1001, reason="Server shutdown")
        with pytest.raises(ConnectionError):
            await hub.register(_connection())


class TestEvents:
    """Event payload shapes."""

    def test_new_order_carries_full_order(self):
        order = OrderOutput(
            id=12,
            table_id=4,
            table_number=4,
            total_price=Decimal("46.00"),
            status="pending",
            created_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        )

        event = new_order_event(order)

        assert event["type"] == "NEW_ORDER"
        assert event["order"]["id"] == 12
        assert event["order"]["total_price"] == 46.0
        assert event["order"]["status"] == "pending"

    def test_order_updated(self):
        assert order_updated_event(12, "ready") == {"type": "ORDER_UPDATED", "id": 12, "status": "ready"}

    def test_table_updated(self):
        assert table_updated_event(4) == {"type": "TABLE_UPDATED", "id": 4}
