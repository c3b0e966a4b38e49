"""Live websocket connections and their outbound queues.

The relay never awaits: it calls :meth:`ConnectionManager.emit`, which only
enqueues. One writer task per connection (:meth:`ConnectionManager.pump`)
drains that queue in order, so a handler's state change and the
notifications it produces are never split by another event.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Protocol

from fastapi import WebSocket

from .logging_config import get_logger
from .schemas import ServerFrame

logger = get_logger(__name__)


class Transport(Protocol):
    def emit(self, connection_id: str, event: str, data: Any = None) -> bool: ...


class ConnectionManager:
    def __init__(self) -> None:
        # connection_id -> websocket
        self.connections: Dict[str, WebSocket] = {}
        self._queues: Dict[str, asyncio.Queue] = {}

    def register(self, connection_id: str, ws: WebSocket) -> None:
        self.connections[connection_id] = ws
        self._queues[connection_id] = asyncio.Queue()
        logger.debug(f"Registered connection {connection_id} ({len(self.connections)} live)")

    def unregister(self, connection_id: str) -> None:
        self.connections.pop(connection_id, None)
        queue = self._queues.pop(connection_id, None)
        if queue is not None:
            queue.put_nowait(None)  # stops the writer
        logger.debug(f"Unregistered connection {connection_id} ({len(self.connections)} live)")

    # -------------------- Outbound -------------------- #

    def send(self, connection_id: Optional[str], message: Dict[str, Any]) -> bool:
        """Queue a raw JSON *message*; return *False* if nobody is listening."""
        queue = self._queues.get(connection_id) if connection_id else None
        if queue is None:
            logger.debug(f"Dropping message for unknown connection {connection_id}")
            return False
        queue.put_nowait(message)
        return True

    def emit(self, connection_id: str, event: str, data: Any = None) -> bool:
        frame = ServerFrame(type=event, data=data if data is not None else {})
        return self.send(connection_id, frame.model_dump())

    async def pump(self, connection_id: str) -> None:
        """Write queued messages to the websocket until the connection is unregistered."""
        queue = self._queues.get(connection_id)
        ws = self.connections.get(connection_id)
        if queue is None or ws is None:
            return
        while True:
            message = await queue.get()
            if message is None:
                return
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to send to {connection_id}: {e}")
                # dead socket: stop queueing for it
                if self._queues.get(connection_id) is queue:
                    self.unregister(connection_id)
                return


__all__ = ["Transport", "ConnectionManager"]
