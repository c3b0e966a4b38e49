"""In-memory room registry.

The registry is the only owner of :class:`~signaling.room.Room` records.
Everything else looks rooms up by identifier and never keeps its own copy,
so dropping a record here ends the session for good.
"""
from __future__ import annotations

import uuid
from typing import Dict, Optional

from .constants import ROOM_ID_LENGTH
from .logging_config import get_logger
from .room import Room

logger = get_logger(__name__)


class RoomRegistry:
    def __init__(self, id_length: int = ROOM_ID_LENGTH):
        self._rooms: Dict[str, Room] = {}
        self._id_length = id_length

    # ---------- public API ---------- #

    def create_room(self) -> str:
        """Register an empty room under a fresh short identifier and return it."""
        room_id = self._fresh_id()
        self._rooms[room_id] = Room(room_id)
        logger.info(f"Room {room_id} created ({len(self._rooms)} live)")
        return room_id

    def get_room(self, room_id: Optional[str]) -> Optional[Room]:
        if room_id is None:
            return None
        return self._rooms.get(room_id)

    def delete_room(self, room_id: str) -> None:
        """Remove *room_id*; a no-op if it is already gone."""
        if self._rooms.pop(room_id, None) is not None:
            logger.info(f"Room {room_id} deleted ({len(self._rooms)} live)")

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    # ---------- helpers ---------- #

    def _fresh_id(self) -> str:
        while True:
            room_id = uuid.uuid4().hex[: self._id_length]
            if room_id not in self._rooms:
                return room_id


__all__ = ["RoomRegistry"]
