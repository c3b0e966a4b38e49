"""Session relay: room membership, host permissions and message forwarding.

All handlers are synchronous. Each one reads and mutates room state through
the :class:`~signaling.registry.RoomRegistry` and queues notifications on the
transport, so a single inbound event is applied as a whole before the next
one is looked at.

Privileged events from anyone but the room's current host are dropped
without a reply, as are messages addressed to identifiers with no live
binding. Only ``join`` against an unknown room reports an error back.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .connections import Transport
from .constants import DEFAULT_GUEST_NAME, DEFAULT_KICK_REASON, REJECT_REASON
from .logging_config import get_logger
from .registry import RoomRegistry
from .room import Room
from .schemas import (
    AcceptGuestPayload,
    ClientEvent,
    CreateRoomPayload,
    HostCommandPayload,
    JoinPayload,
    RejectGuestPayload,
    Role,
    SignalPayload,
    lobby_snapshot,
)
from .session import Session

logger = get_logger(__name__)

ROOM_NOT_FOUND = {"error": "room-not-found"}
ALREADY_JOINED = {"error": "already-joined"}


class SessionRelay:
    def __init__(self, registry: RoomRegistry, transport: Transport):
        self.registry = registry
        self.transport = transport
        # connection_id -> what it joined as
        self.sessions: Dict[str, Session] = {}

    # ---------------------------------------------------------------------
    # Dispatch
    # ---------------------------------------------------------------------

    def dispatch(self, connection_id: str, event: ClientEvent) -> Optional[dict]:
        """Route *event* to its handler; return the acknowledgment payload, if any."""
        if isinstance(event, CreateRoomPayload):
            return self.create_room(connection_id)
        elif isinstance(event, JoinPayload):
            return self.join(connection_id, event.role, event.room, event.name)
        elif isinstance(event, AcceptGuestPayload):
            self.host_accept_guest(connection_id, event.room, event.guest_id)
        elif isinstance(event, RejectGuestPayload):
            self.host_reject_guest(connection_id, event.room, event.guest_id)
        elif isinstance(event, SignalPayload):
            self.signal(connection_id, event.to, event.type, event.data)
        elif isinstance(event, HostCommandPayload):
            self.host_command(connection_id, event.room, event.cmd, event.target, event.payload)
        else:
            raise TypeError(f"Unhandled client event {type(event).__name__}")
        return None

    # ---------------------------------------------------------------------
    # Room setup
    # ---------------------------------------------------------------------

    def create_room(self, connection_id: str) -> dict:
        room_id = self.registry.create_room()
        logger.info(f"Connection {connection_id} created room {room_id}")
        return {"room": room_id}

    def join(self, connection_id: str, role: Role, room_id: str, name: Optional[str] = None) -> dict:
        if connection_id in self.sessions:
            logger.info(f"Connection {connection_id} tried to join {room_id} twice")
            return dict(ALREADY_JOINED)
        room = self.registry.get_room(room_id)
        if room is None:
            logger.info(f"Connection {connection_id} tried to join unknown room {room_id}")
            return dict(ROOM_NOT_FOUND)

        self.sessions[connection_id] = Session(role=role, room_id=room_id, display_name=name or role)
        logger.info(f"Connection {connection_id} joined room {room_id} as {role}")

        if role == "host":
            room.host_id = connection_id
            self._send_lobby(room)
            return {"ok": True}
        if role == "guest":
            # Queued even if a guest is already admitted; the host decides.
            room.add_to_lobby(connection_id, name or DEFAULT_GUEST_NAME)
            self._send_lobby(room)
            return {"status": "waiting"}
        room.viewer_id = connection_id
        if room.host_id:
            self.transport.emit(room.host_id, "viewer-ready", {"viewerId": connection_id})
        return {"ok": True}

    # ---------------------------------------------------------------------
    # Host-only events
    # ---------------------------------------------------------------------

    def host_accept_guest(self, connection_id: str, room_id: str, guest_id: str) -> None:
        room = self._hosted_room(connection_id, room_id, "host-accept-guest")
        if room is None:
            return
        session = self.sessions.get(guest_id)
        if session is None or session.role != "guest" or session.room_id != room_id:
            logger.debug(f"Room {room_id}: {guest_id} is not a guest of this room")
            return
        # Also re-admits a guest that was kicked earlier.
        room.admit_guest(guest_id)
        logger.info(f"Room {room_id}: host admitted guest {guest_id}")
        self.transport.emit(guest_id, "accepted", {"room": room_id, "hostId": connection_id})
        self.transport.emit(connection_id, "guest-accepted", {"guestId": guest_id})
        self._send_lobby(room)

    def host_reject_guest(self, connection_id: str, room_id: str, guest_id: str) -> None:
        room = self._hosted_room(connection_id, room_id, "host-reject-guest")
        if room is None:
            return
        if not room.remove_from_lobby(guest_id):
            logger.debug(f"Room {room_id}: {guest_id} is not waiting in the lobby")
            return
        logger.info(f"Room {room_id}: host rejected guest {guest_id}")
        self.transport.emit(guest_id, "rejected", {"reason": REJECT_REASON})
        self._send_lobby(room)

    def host_command(
        self,
        connection_id: str,
        room_id: str,
        cmd: str,
        target: Optional[str] = None,
        payload: Any = None,
    ) -> None:
        room = self._hosted_room(connection_id, room_id, f"host-command {cmd}")
        if room is None:
            return
        if payload is None:
            payload = {}

        if cmd == "kick":
            if not target:
                return
            reason = (payload.get("reason") if isinstance(payload, dict) else None) or DEFAULT_KICK_REASON
            self.transport.emit(target, "kicked", {"reason": reason})
            if room.guest_id == target:
                room.guest_id = None
            logger.info(f"Room {room_id}: host kicked {target} ({reason})")
        elif cmd == "mute":
            if target:
                self.transport.emit(target, "mute", payload)
        elif cmd == "overlay":
            if room.viewer_id:
                self.transport.emit(room.viewer_id, "overlay", payload)
        elif cmd == "start-forward":
            self.transport.emit(
                connection_id, "start-forward", {"viewerId": room.viewer_id, "guestId": room.guest_id}
            )
            if room.viewer_id:
                self.transport.emit(room.viewer_id, "prepare-viewer", {"room": room_id, "hostId": connection_id})
            logger.info(f"Room {room_id}: forwarding started")
        else:
            logger.debug(f"Room {room_id}: unknown host command {cmd!r}")

    # ---------------------------------------------------------------------
    # Peer-to-peer relay
    # ---------------------------------------------------------------------

    def signal(self, connection_id: str, to: Optional[str], signal_type: Optional[str], data: Any) -> None:
        if not to:
            return
        logger.debug(f"Signal {signal_type} {connection_id} -> {to}")
        self.transport.emit(to, "signal", {"from": connection_id, "type": signal_type, "data": data})

    # ---------------------------------------------------------------------
    # Disconnect cleanup
    # ---------------------------------------------------------------------

    def disconnect(self, connection_id: str) -> None:
        """Release whatever *connection_id* held. Never raises on stale ids."""
        session = self.sessions.pop(connection_id, None)
        if session is None:
            return
        room = self.registry.get_room(session.room_id)
        if room is None:
            return

        if session.role == "host":
            if room.host_id != connection_id:
                # Replaced by a later host; the room lives on.
                return
            for peer in (room.guest_id, room.viewer_id):
                if peer:
                    self.transport.emit(peer, "host-left")
            self.registry.delete_room(room.room_id)
            logger.info(f"Room {room.room_id} closed: host {connection_id} left")
        elif session.role == "guest":
            room.remove_from_lobby(connection_id)
            if room.guest_id == connection_id:
                room.guest_id = None
            self._send_lobby(room)
        elif session.role == "viewer":
            if room.viewer_id != connection_id:
                return
            room.viewer_id = None
            if room.host_id:
                self.transport.emit(room.host_id, "viewer-left")

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------

    def _hosted_room(self, connection_id: str, room_id: str, what: str) -> Optional[Room]:
        """Return the room if *connection_id* is its current host, else *None*."""
        room = self.registry.get_room(room_id)
        if room is None or room.host_id != connection_id:
            logger.debug(f"Ignoring {what} from {connection_id} for room {room_id}: not host")
            return None
        return room

    def _send_lobby(self, room: Room) -> None:
        if room.host_id:
            self.transport.emit(room.host_id, "lobby-list", lobby_snapshot(room.lobby))


__all__ = ["SessionRelay", "ROOM_NOT_FOUND", "ALREADY_JOINED"]
