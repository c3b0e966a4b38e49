from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from ..logging_config import get_logger
from ..registry import RoomRegistry
from ..schemas import CreateRoomResponse, RoomSummary

logger = get_logger(__name__)

router = APIRouter(prefix="", tags=["rooms"])


def _registry(request: Request) -> RoomRegistry:
    return request.app.state.registry


@router.post("/rooms", response_model=CreateRoomResponse)
async def create_room(request: Request):
    room_id = _registry(request).create_room()
    return CreateRoomResponse(room=room_id)


@router.get("/rooms/{room_id}", response_model=RoomSummary, response_model_by_alias=True)
async def get_room(room_id: str, request: Request):
    room = _registry(request).get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room.summary()


@router.get("/health")
async def health(request: Request):
    return {"status": "ok", "rooms": len(_registry(request))}
