from __future__ import annotations

from dataclasses import dataclass

from .schemas import Role


@dataclass(frozen=True)
class Session:
    """What a connection became when it joined: its role, room and name.

    Frozen because a connection's role never changes after ``join``.
    """

    role: Role
    room_id: str
    display_name: str


__all__ = ["Session"]
