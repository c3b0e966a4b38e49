"""Wire models for the signaling websocket.

Every inbound frame is a :class:`ClientFrame` ``{"type", "data", "ack"}``.
:func:`parse_event` looks ``type`` up in :data:`EVENT_PAYLOADS` and
validates ``data`` into that event's payload model. Outbound frames are
:class:`ServerFrame` notifications or :class:`AckFrame` replies carrying
the client's ``ack`` token back.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["host", "guest", "viewer"]
HostCommand = Literal["kick", "mute", "overlay", "start-forward"]

# -----------------------------
# Runtime & Lobby
# -----------------------------


class LobbyEntry(BaseModel):
    """A guest waiting for the host's admission decision."""

    model_config = ConfigDict(populate_by_name=True)

    connection_id: str = Field(alias="id")
    display_name: str = Field(alias="name")
    joined_at: int = Field(alias="when")  # epoch milliseconds


class RoomSummary(BaseModel):
    """Read-only view of a room for the REST surface."""

    model_config = ConfigDict(populate_by_name=True)

    room: str
    host_id: Optional[str] = Field(default=None, alias="hostId")
    guest_id: Optional[str] = Field(default=None, alias="guestId")
    viewer_id: Optional[str] = Field(default=None, alias="viewerId")
    lobby_size: int = Field(default=0, alias="lobbySize")


class CreateRoomResponse(BaseModel):
    room: str


# -----------------------------
# Client -> server frames
# -----------------------------


class ClientFrame(BaseModel):
    """Envelope of every inbound frame: ``{"type", "data", "ack"}``."""

    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
    ack: Optional[Union[str, int]] = None


class CreateRoomPayload(BaseModel):
    pass


class JoinPayload(BaseModel):
    role: Role
    room: str
    name: Optional[str] = None


class GuestDecisionPayload(BaseModel):
    """Shared by ``host-accept-guest`` and ``host-reject-guest``."""

    model_config = ConfigDict(populate_by_name=True)

    room: str
    guest_id: str = Field(alias="guestId")


class AcceptGuestPayload(GuestDecisionPayload):
    pass


class RejectGuestPayload(GuestDecisionPayload):
    pass


class SignalPayload(BaseModel):
    # ``data`` is opaque: offers, answers and candidates pass through untouched
    to: Optional[str] = None
    type: Optional[str] = None
    data: Any = None


class HostCommandPayload(BaseModel):
    room: str
    cmd: HostCommand
    target: Optional[str] = None
    # Forwarded verbatim for mute/overlay; any JSON value
    payload: Any = None


ClientEvent = Union[
    CreateRoomPayload,
    JoinPayload,
    AcceptGuestPayload,
    RejectGuestPayload,
    SignalPayload,
    HostCommandPayload,
]

EVENT_PAYLOADS: Dict[str, Type[BaseModel]] = {
    "create-room": CreateRoomPayload,
    "join": JoinPayload,
    "host-accept-guest": AcceptGuestPayload,
    "host-reject-guest": RejectGuestPayload,
    "signal": SignalPayload,
    "host-command": HostCommandPayload,
}


class UnknownEvent(ValueError):
    """Raised by :func:`parse_event` for an unregistered ``type``."""


def parse_event(frame: ClientFrame) -> ClientEvent:
    """Validate ``frame.data`` against the payload model for ``frame.type``.

    Raises
    ------
    UnknownEvent
        If ``frame.type`` is not a client event.
    pydantic.ValidationError
        If the payload does not match its model.
    """
    model = EVENT_PAYLOADS.get(frame.type)
    if model is None:
        raise UnknownEvent(frame.type)
    return model.model_validate(frame.data)  # type: ignore[return-value]


# -----------------------------
# Server -> client frames
# -----------------------------


class ServerFrame(BaseModel):
    type: str
    data: Any = None


class AckFrame(BaseModel):
    type: Literal["ack"] = "ack"
    ack: Optional[Union[str, int]] = None
    data: Dict[str, Any]


def lobby_snapshot(entries: List[LobbyEntry]) -> List[Dict[str, Any]]:
    """Serialise lobby entries for the ``lobby-list`` notification."""
    return [e.model_dump(by_alias=True) for e in entries]


__all__ = [
    "Role",
    "HostCommand",
    "LobbyEntry",
    "RoomSummary",
    "CreateRoomResponse",
    "ClientFrame",
    "CreateRoomPayload",
    "JoinPayload",
    "GuestDecisionPayload",
    "AcceptGuestPayload",
    "RejectGuestPayload",
    "SignalPayload",
    "HostCommandPayload",
    "ClientEvent",
    "EVENT_PAYLOADS",
    "UnknownEvent",
    "parse_event",
    "ServerFrame",
    "AckFrame",
    "lobby_snapshot",
]
