"""
WebSocket endpoint for the shared real-time channel.

Kitchen panel, admin dashboard and table view all connect to the same
endpoint and receive every lifecycle event. No per-client filtering.
"""

from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect

from shared.config.logging import ws_gateway_logger as logger
from shared.config.settings import settings
from ws_gateway.notification_hub import NotificationHub


router = APIRouter(tags=["realtime"])

REALTIME_PATH = "/ws"


def get_notification_hub(request: Request) -> NotificationHub:
    """FastAPI dependency: the process-wide hub created by the lifespan."""
    return request.app.state.notification_hub


@router.websocket(REALTIME_PATH)
async def realtime_websocket(websocket: WebSocket) -> None:
    hub: NotificationHub = websocket.app.state.notification_hub

    await websocket.accept()
    try:
        await hub.register(websocket)
    except ConnectionError as e:
        logger.warning("Realtime connection rejected", reason=str(e))
        await websocket.close(code=1013, reason=str(e))
        return

    try:
        while True:
            data = await websocket.receive_text()

            if len(data) > settings.ws_max_message_size:
                logger.warning(
                    "Message size exceeded limit",
                    size=len(data),
                    max_size=settings.ws_max_message_size,
                )
                await websocket.close(code=1009, reason="Message too large")
                break

            hub.record_heartbeat(websocket)
            # Heartbeat in both plain text and JSON format
            if data == "ping":
                await websocket.send_text("pong")
            elif data.replace(" ", "") == '{"type":"ping"}':
                await websocket.send_text('{"type":"pong"}')
            else:
                logger.debug(
                    "Unknown realtime message",
                    message=data[:100] if len(data) > 100 else data,
                )

    except WebSocketDisconnect as e:
        logger.debug("Realtime client disconnected", code=e.code)
    finally:
        await hub.unregister(websocket)
