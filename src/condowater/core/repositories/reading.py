"""Repository for WaterReading model."""

from __future__ import annotations

from typing import Any

from condowater.core.models import WaterReading
from condowater.core.repositories.base import BaseRepository


class ReadingRepository(BaseRepository[WaterReading]):
    """Reading-specific repository operations."""

    def __init__(self) -> None:
        super().__init__(WaterReading)

    async def get_for_month(self, month: str) -> list[WaterReading]:
        """Get all readings of a month, ordered by room."""
        return await self.model.filter(month=month).order_by("room_id", "id")

    async def get_for_month_with_rooms(self, month: str) -> list[WaterReading]:
        """Same as ``get_for_month`` with the room of each reading prefetched."""
        return await (
            self.model.filter(month=month)
            .order_by("room_id", "id")
            .prefetch_related("room")
        )

    async def upsert(
        self, room_id: int, month: str, values: dict[str, Any]
    ) -> tuple[WaterReading, bool]:
        """Insert or overwrite the reading keyed by (room, month)."""
        return await self.update_or_create(defaults=values, room_id=room_id, month=month)

    async def delete_for_room(self, room_id: int) -> int:
        """Delete every reading of a room and return how many were removed."""
        return await self.model.filter(room_id=room_id).delete()
