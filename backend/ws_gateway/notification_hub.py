"""
In-process notification hub.
Tracks live real-time connections and fans lifecycle events out to all of them.

One hub per process, created by the application lifespan and handed to the
order service and the WebSocket endpoint by reference. There is no replay
and no queue: a client that is not connected when an event is broadcast
misses it and must refetch on reconnect.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Protocol

from starlette.websockets import WebSocket, WebSocketState

from shared.config.logging import ws_gateway_logger as logger


class RealtimeConnection(Protocol):
    """Anything the hub can push JSON to. Starlette's WebSocket satisfies it."""

    async def send_json(self, data: Any) -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


class DeliveryError(Exception):
    """
    A single connection could not receive an event.

    Internal to the hub: it is logged and the connection is dropped. It never
    reaches the request that triggered the broadcast.
    """

    def __init__(self, connection: Any, cause: BaseException | None = None):
        self.connection = connection
        self.cause = cause
        reason = f"{type(cause).__name__}: {cause}" if cause else "connection not open"
        super().__init__(f"Delivery failed: {reason}")


def _is_ws_connected(ws: Any) -> bool:
    """
    Check if a Starlette WebSocket is in connected state before sending.
    Other connection types are assumed open until a send fails.
    """
    if not isinstance(ws, WebSocket):
        return True
    return ws.client_state == WebSocketState.CONNECTED and ws.application_state == WebSocketState.CONNECTED


class NotificationHub:
    """
    Broadcast set of live connections.

    - register/unregister mutate the set under an asyncio.Lock
    - broadcast iterates a snapshot, so connects and disconnects during a
      fan-out never break the iteration
    - broadcasts are serialized and each one sends to all clients at once,
      bounded by send_timeout, so one stalled client never holds up the rest
    - writers hold commit_order_lock across commit and broadcast, so every
      client receives events in the order their writes committed
    """

    def __init__(
        self,
        max_connections: int = 500,
        heartbeat_timeout: float = 0,
        send_timeout: float = 5.0,
        batch_size: int = 50,
    ):
        self.max_connections = max_connections
        # 0 disables stale connection sweeping
        self.heartbeat_timeout = heartbeat_timeout
        self.send_timeout = send_timeout
        self.batch_size = batch_size

        self._connections: set[Any] = set()
        self._last_heartbeat: dict[Any, float] = {}
        self._lock = asyncio.Lock()
        self._broadcast_lock = asyncio.Lock()
        self._commit_order_lock = asyncio.Lock()
        self._closing: set[asyncio.Task] = set()
        self._shutdown = False

        self._events_sent = 0
        self._delivery_failures = 0

    # =========================================================================
    # Membership
    # =========================================================================

    async def register(self, connection: RealtimeConnection) -> None:
        """
        Add a connection to the broadcast set.

        Raises:
            ConnectionError: Hub is shutting down or the connection limit is reached
        """
        if self._shutdown:
            raise ConnectionError("Server is shutting down")

        async with self._lock:
            if len(self._connections) >= self.max_connections:
                raise ConnectionError(f"Connection limit reached ({self.max_connections})")
            self._connections.add(connection)
            self._last_heartbeat[connection] = time.time()
            total = len(self._connections)

        logger.info("Realtime client registered", connections=total)

    async def unregister(self, connection: RealtimeConnection) -> None:
        """Remove a connection. Unknown connections are ignored."""
        async with self._lock:
            if connection not in self._connections:
                return
            self._connections.discard(connection)
            self._last_heartbeat.pop(connection, None)
            total = len(self._connections)

        logger.info("Realtime client unregistered", connections=total)

    # =========================================================================
    # Fan-out
    # =========================================================================

    @property
    def commit_order_lock(self) -> asyncio.Lock:
        """Held by writers from commit through broadcast to keep events in commit order."""
        return self._commit_order_lock

    async def broadcast(self, event: dict[str, Any]) -> int:
        """
        Deliver an event to every registered connection, best effort.

        Sends run concurrently in batches, each bounded by send_timeout, so
        a stalled client costs one timeout per event, not one per client.
        A failing connection is logged, removed and closed in the
        background; the others still receive the event. Never raises
        because of a delivery failure.

        Returns:
            Number of connections that received the event.
        """
        async with self._broadcast_lock:
            async with self._lock:
                connections = list(self._connections)

            sent = 0
            failed: list[Any] = []
            for i in range(0, len(connections), self.batch_size):
                batch = connections[i : i + self.batch_size]
                results = await asyncio.gather(
                    *[self._deliver(connection, event) for connection in batch],
                    return_exceptions=True,
                )
                for connection, result in zip(batch, results):
                    if result is None:
                        sent += 1
                        continue
                    logger.warning(
                        "Realtime delivery failed, dropping connection",
                        event_type=event.get("type"),
                        error=str(result),
                    )
                    failed.append(connection)

            for connection in failed:
                await self.unregister(connection)
                self._close_in_background(connection)

            self._events_sent += 1
            self._delivery_failures += len(failed)

        logger.debug(
            "Event broadcast",
            event_type=event.get("type"),
            sent=sent,
            failed=len(failed),
        )
        return sent

    async def _deliver(self, connection: Any, event: dict[str, Any]) -> None:
        if not _is_ws_connected(connection):
            raise DeliveryError(connection)
        try:
            await asyncio.wait_for(connection.send_json(event), timeout=self.send_timeout)
        except Exception as e:
            raise DeliveryError(connection, e) from e

    def _close_in_background(self, connection: Any) -> None:
        """Close a dropped connection so its client reconnects and refetches."""
        task = asyncio.create_task(self._close_dropped(connection))
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)

    async def _close_dropped(self, connection: Any) -> None:
        try:
            await asyncio.wait_for(
                connection.close(code=1011, reason="Delivery failed"),
                timeout=self.send_timeout,
            )
        except Exception as e:
            logger.debug("Failed to close dropped connection", error=str(e))

    # =========================================================================
    # Heartbeat tracking
    # =========================================================================

    def record_heartbeat(self, connection: RealtimeConnection) -> None:
        """Record client traffic from a connection."""
        if connection in self._connections:
            self._last_heartbeat[connection] = time.time()

    def get_stale_connections(self) -> list[Any]:
        """Connections silent for longer than heartbeat_timeout."""
        if self.heartbeat_timeout <= 0:
            return []
        now = time.time()
        return [
            ws
            for ws, last_time in list(self._last_heartbeat.items())
            if now - last_time > self.heartbeat_timeout
        ]

    async def cleanup_stale_connections(self) -> int:
        """
        Close and remove stale connections.

        Returns:
            Number of connections cleaned up.
        """
        stale = self.get_stale_connections()
        for ws in stale:
            try:
                await ws.close(code=1001, reason="Heartbeat timeout")
            except Exception as e:
                logger.warning("Failed to close stale connection", error=str(e))
            await self.unregister(ws)
        return len(stale)

    async def shutdown(self) -> int:
        """
        Graceful shutdown: reject new registrations and close existing ones.

        Returns:
            Number of connections closed.
        """
        self._shutdown = True
        logger.info("Notification hub shutting down", connections=self.total_connections)

        if self._closing:
            await asyncio.gather(*self._closing, return_exceptions=True)

        async with self._lock:
            connections = list(self._connections)

        closed = 0
        for ws in connections:
            try:
                await ws.close(code=1001, reason="Server shutdown")
                closed += 1
            except Exception as e:
                logger.warning("Failed to close connection during shutdown", error=str(e))
            await self.unregister(ws)

        logger.info("Notification hub shutdown complete", closed=closed)
        return closed

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def total_connections(self) -> int:
        """Get total number of active connections."""
        return len(self._connections)

    def is_registered(self, connection: Any) -> bool:
        return connection in self._connections

    def is_shutting_down(self) -> bool:
        return self._shutdown

    def get_stats(self) -> dict[str, Any]:
        """Get connection statistics."""
        return {
            "total_connections": self.total_connections,
            "max_connections": self.max_connections,
            "events_broadcast": self._events_sent,
            "delivery_failures": self._delivery_failures,
            "heartbeat_timeout": self.heartbeat_timeout,
        }


async def run_heartbeat_cleanup(hub: NotificationHub, interval: float) -> None:
    """
    Periodically clean up stale connections until cancelled.
    Started by the application lifespan when heartbeat sweeping is enabled.
    """
    while True:
        try:
            await asyncio.sleep(interval)
            cleaned = await hub.cleanup_stale_connections()
            if cleaned > 0:
                logger.info("Cleaned up stale connections", count=cleaned)
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.error("Error in heartbeat cleanup", error=str(e))
