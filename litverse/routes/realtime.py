import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from litverse.realtime import dispatch_socket_event, hub

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def socket_endpoint(websocket: WebSocket):
    await websocket.accept()
    hub.connect(websocket)
    logger.info(f"Socket connected ({len(hub.connections)} open)")

    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                logger.warning("Ignoring socket frame that is not JSON")
                continue
            await dispatch_socket_event(hub, websocket, message)
    except WebSocketDisconnect:
        logger.info("Socket disconnected")
    finally:
        hub.disconnect(websocket)
