from __future__ import annotations

import time
from typing import List, Optional

from .schemas import LobbyEntry, RoomSummary

# NOTE: ``Room`` holds connection *identifiers* only. The websockets
# themselves belong to ``ConnectionManager``.


class Room:
    """Runtime state of one signaling session: host, admitted guest, viewer and lobby."""

    def __init__(self, room_id: str):
        self.room_id = room_id
        self.host_id: Optional[str] = None
        self.guest_id: Optional[str] = None
        self.viewer_id: Optional[str] = None
        # Pending guests in arrival order
        self.lobby: List[LobbyEntry] = []

    # -------------------- Lobby management -------------------- #

    def add_to_lobby(self, connection_id: str, display_name: str) -> LobbyEntry:
        entry = LobbyEntry(
            connection_id=connection_id,
            display_name=display_name,
            joined_at=int(time.time() * 1000),
        )
        self.lobby.append(entry)
        return entry

    def in_lobby(self, connection_id: str) -> bool:
        return any(e.connection_id == connection_id for e in self.lobby)

    def remove_from_lobby(self, connection_id: str) -> bool:
        """Drop *connection_id* from the lobby; return *True* if it was there."""
        before = len(self.lobby)
        self.lobby = [e for e in self.lobby if e.connection_id != connection_id]
        return len(self.lobby) != before

    # -------------------- Slot helpers -------------------- #

    def admit_guest(self, connection_id: str) -> None:
        """Move *connection_id* from the lobby into the guest slot."""
        self.remove_from_lobby(connection_id)
        self.guest_id = connection_id

    def summary(self) -> RoomSummary:
        return RoomSummary(
            room=self.room_id,
            host_id=self.host_id,
            guest_id=self.guest_id,
            viewer_id=self.viewer_id,
            lobby_size=len(self.lobby),
        )

    def __repr__(self) -> str:
        return (
            f"Room({self.room_id!r}, host={self.host_id!r}, guest={self.guest_id!r}, "
            f"viewer={self.viewer_id!r}, lobby={len(self.lobby)})"
        )


__all__ = ["Room"]
