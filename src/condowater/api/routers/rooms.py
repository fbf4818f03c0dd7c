"""Routes for room administration."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from condowater.api import deps
from condowater.api.deps import AdminUser
from condowater.api.schemas import RoomCreateRequest, RoomUpdateRequest, serialize_room
from condowater.services.readings import parse_id

router = APIRouter(prefix="/api/rooms", tags=["rooms"])

room_service = deps.room_service


@router.get("")
async def get_rooms(
    id: str | None = None,
    search: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> dict[str, Any] | list[dict[str, Any]]:
    """Returns one room when ``id`` is given, otherwise a page of rooms."""
    if id is not None:
        room = await room_service.get_room(parse_id(id))
        return serialize_room(room)

    rooms = await room_service.list_rooms(search=search, limit=limit, offset=offset)
    return [serialize_room(room) for room in rooms]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_room(payload: RoomCreateRequest, user: AdminUser) -> dict[str, Any]:
    room = await room_service.create_room(payload.roomNumber, payload.ownerName)
    return serialize_room(room)


@router.put("")
async def update_room(
    payload: RoomUpdateRequest, user: AdminUser, id: str | None = None
) -> dict[str, Any]:
    room = await room_service.update_room(
        parse_id(id), room_number=payload.roomNumber, owner_name=payload.ownerName
    )
    return serialize_room(room)


@router.delete("")
async def delete_room(user: AdminUser, id: str | None = None) -> dict[str, Any]:
    """Deletes a room and the readings recorded for it."""
    deletion = await room_service.delete_room(parse_id(id))
    return {
        "message": "Room deleted successfully",
        "room": serialize_room(deletion.room),
        "deletedReadings": deletion.deleted_readings,
    }
