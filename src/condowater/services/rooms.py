"""Service for managing condo rooms."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from condowater.config import settings
from condowater.core.errors import ConflictError, NotFoundError, ValidationError
from condowater.core.models import Room
from condowater.core.repositories.reading import ReadingRepository
from condowater.core.repositories.room import RoomRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomDeletion:
    """A deleted room and how many of its readings went with it."""

    room: Room
    deleted_readings: int


def _clean(value: object, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", "INVALID_FIELD_TYPE")
    return value.strip()


class RoomService:
    """Validates and applies administrator changes to rooms."""

    def __init__(self, room_repo: RoomRepository, reading_repo: ReadingRepository):
        self._room_repo = room_repo
        self._reading_repo = reading_repo

    async def get_room(self, room_id: int) -> Room:
        room = await self._room_repo.get(pk=room_id)
        if not room:
            raise NotFoundError("Room not found", "ROOM_NOT_FOUND")
        return room

    async def list_rooms(
        self, search: str | None = None, limit: int | None = None, offset: int = 0
    ) -> list[Room]:
        """Lists rooms; the page size is capped at ``MAX_PAGE_SIZE``."""
        page_size = settings.MAX_PAGE_SIZE
        if limit is not None:
            page_size = max(0, min(limit, settings.MAX_PAGE_SIZE))
        return await self._room_repo.list_rooms(
            search=search, limit=page_size, offset=max(0, offset)
        )

    async def create_room(self, room_number: object, owner_name: object) -> Room:
        """
        Creates a room.

        Raises:
            ValidationError: if a field is missing, not a string or blank.
            ConflictError: if the room number is already taken.
        """
        if not room_number or not owner_name:
            raise ValidationError(
                "roomNumber and ownerName are required", "MISSING_REQUIRED_FIELDS"
            )
        number = _clean(room_number, "roomNumber")
        owner = _clean(owner_name, "ownerName")
        if not number or not owner:
            raise ValidationError(
                "roomNumber and ownerName cannot be empty", "EMPTY_REQUIRED_FIELDS"
            )

        await self._ensure_number_free(number)
        try:
            room = await self._room_repo.create(room_number=number, owner_name=owner)
        except IntegrityError as exc:
            raise ConflictError(
                "Room number already exists", "DUPLICATE_ROOM_NUMBER"
            ) from exc
        logger.info(f"Created room {room.room_number} (id={room.id}).")
        return room

    async def update_room(
        self, room_id: int, room_number: object = None, owner_name: object = None
    ) -> Room:
        """Changes the room number and/or owner name of a room."""
        room = await self.get_room(room_id)

        if room_number is None and owner_name is None:
            raise ValidationError(
                "At least one field (roomNumber or ownerName) must be provided",
                "NO_UPDATE_FIELDS",
            )

        changes: dict[str, str] = {}
        number = _clean(room_number, "roomNumber")
        if number is not None:
            if not number:
                raise ValidationError("roomNumber cannot be empty", "EMPTY_ROOM_NUMBER")
            if number != room.room_number:
                await self._ensure_number_free(number)
            changes["room_number"] = number

        owner = _clean(owner_name, "ownerName")
        if owner is not None:
            if not owner:
                raise ValidationError("ownerName cannot be empty", "EMPTY_OWNER_NAME")
            changes["owner_name"] = owner

        try:
            return await self._room_repo.update(room, **changes)
        except IntegrityError as exc:
            raise ConflictError(
                "Room number already exists", "DUPLICATE_ROOM_NUMBER"
            ) from exc

    async def delete_room(self, room_id: int) -> RoomDeletion:
        """Deletes a room together with its readings."""
        room = await self.get_room(room_id)
        async with in_transaction():
            readings = await self._reading_repo.delete_for_room(room.id)
            await room.delete()
        logger.info(
            f"Deleted room {room.room_number} (id={room_id}) "
            f"and {readings} reading(s)."
        )
        return RoomDeletion(room=room, deleted_readings=readings)

    async def _ensure_number_free(self, room_number: str) -> None:
        if await self._room_repo.get_by_number(room_number):
            raise ConflictError("Room number already exists", "DUPLICATE_ROOM_NUMBER")
