from __future__ import annotations

import asyncio
import json
import uuid
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from ..connections import ConnectionManager
from ..logging_config import get_logger
from ..relay import SessionRelay
from ..schemas import AckFrame, ClientFrame, UnknownEvent, parse_event

logger = get_logger(__name__)

router = APIRouter(prefix="", tags=["ws"])

INVALID_EVENT = {"reason": "invalid-event"}


def handle_frame(relay: SessionRelay, manager: ConnectionManager, connection_id: str, raw: Optional[str]) -> None:
    """Decode one inbound frame and hand it to the relay.

    *raw* is *None* for binary frames, which are answered like any other
    malformed frame.
    """
    if raw is None:
        logger.warning(f"Non-text frame from {connection_id}")
        manager.emit(connection_id, "error", INVALID_EVENT)
        return
    try:
        frame = ClientFrame.model_validate(json.loads(raw))
        event = parse_event(frame)
    except (json.JSONDecodeError, RecursionError, ValidationError, UnknownEvent) as e:
        logger.warning(f"Malformed frame from {connection_id}: {e}")
        manager.emit(connection_id, "error", INVALID_EVENT)
        return

    reply = relay.dispatch(connection_id, event)
    if reply is not None:
        manager.send(connection_id, AckFrame(ack=frame.ack, data=reply).model_dump())


@router.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    relay: SessionRelay = ws.app.state.relay
    manager: ConnectionManager = ws.app.state.connections

    await ws.accept()
    connection_id = uuid.uuid4().hex
    manager.register(connection_id, ws)
    writer = asyncio.create_task(manager.pump(connection_id))
    logger.info(f"Socket connected: {connection_id}")
    manager.emit(connection_id, "connected", {"id": connection_id})

    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                break
            handle_frame(relay, manager, connection_id, message.get("text"))
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"WebSocket error on {connection_id}: {e}", exc_info=True)
    finally:
        logger.info(f"Disconnected: {connection_id}")
        relay.disconnect(connection_id)
        manager.unregister(connection_id)
        writer.cancel()
        try:
            await writer
        except asyncio.CancelledError:
            pass
