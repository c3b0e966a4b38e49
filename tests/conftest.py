from __future__ import annotations

from typing import Any, List, Tuple

import pytest

from signaling.registry import RoomRegistry
from signaling.relay import SessionRelay


class RecordingTransport:
    """Stands in for ConnectionManager: records every emit instead of sending."""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, str, Any]] = []

    def emit(self, connection_id: str, event: str, data: Any = None) -> bool:
        self.sent.append((connection_id, event, data if data is not None else {}))
        return True

    def to(self, connection_id: str) -> List[Tuple[str, Any]]:
        return [(event, data) for cid, event, data in self.sent if cid == connection_id]

    def events(self, connection_id: str, event: str) -> List[Any]:
        return [data for cid, ev, data in self.sent if cid == connection_id and ev == event]

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture
def registry() -> RoomRegistry:
    return RoomRegistry()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def relay(registry, transport) -> SessionRelay:
    return SessionRelay(registry, transport)


@pytest.fixture
def room_id(registry) -> str:
    return registry.create_room()
