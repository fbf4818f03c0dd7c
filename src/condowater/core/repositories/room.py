"""Repository for Room model."""

from __future__ import annotations

from tortoise.expressions import Q

from condowater.core.models import Room
from condowater.core.repositories.base import BaseRepository


class RoomRepository(BaseRepository[Room]):
    """Room-specific repository operations."""

    def __init__(self) -> None:
        super().__init__(Room)

    async def get_by_number(self, room_number: str) -> Room | None:
        """Get a room by its exact room number."""
        return await self.model.get_or_none(room_number=room_number)

    async def get_by_number_ci(self, room_number: str) -> Room | None:
        """Get a room by room number, ignoring case."""
        return await self.model.filter(room_number__iexact=room_number).first()

    async def list_rooms(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[Room]:
        """List rooms, optionally filtered by room number or owner name."""
        query = self.model.all()
        if search:
            query = query.filter(
                Q(room_number__icontains=search) | Q(owner_name__icontains=search)
            )
        return await query.order_by("id").offset(offset).limit(limit)
