"""Service for recording and editing water readings."""

from __future__ import annotations

import logging

from condowater.core import calculations
from condowater.core.dates import validate_month
from condowater.core.errors import NotFoundError, ValidationError
from condowater.core.models import WaterReading
from condowater.core.repositories.reading import ReadingRepository
from condowater.core.repositories.room import RoomRepository

logger = logging.getLogger(__name__)


def reading_fields(figures: calculations.ReadingFigures) -> dict:
    """Maps calculated figures onto WaterReading column names."""
    return {
        "last_month": figures.previous,
        "this_month": figures.current,
        "usage": figures.usage,
        "price_per_unit": figures.unit_price,
        "total_price": figures.total_charge,
    }


def parse_id(value: object, code: str = "INVALID_ID") -> int:
    """Parses an integer id given as a number or a string."""
    if isinstance(value, bool):
        raise ValidationError("Valid ID is required", code)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("Valid ID is required", code) from None


class ReadingService:
    """Single-reading operations on top of the reading calculator."""

    def __init__(self, room_repo: RoomRepository, reading_repo: ReadingRepository):
        self._room_repo = room_repo
        self._reading_repo = reading_repo

    async def get_reading(self, reading_id: int) -> WaterReading:
        reading = await self._reading_repo.get(pk=reading_id)
        if not reading:
            raise NotFoundError("Water reading not found", "READING_NOT_FOUND")
        return reading

    async def list_for_month(self, month: str | None) -> list[WaterReading]:
        """Returns the readings of a month ordered by room."""
        validate_month(month)
        return await self._reading_repo.get_for_month(month)

    async def save_reading(
        self,
        room_id: object,
        month: str | None,
        last_month: object = None,
        this_month: object = None,
        price_per_unit: object = None,
    ) -> tuple[WaterReading, bool]:
        """
        Records the reading of a room for a month.

        An existing reading for the same room and month is overwritten, so a
        room never has two readings for one month.

        Returns:
            The stored reading and whether it was newly created.
        """
        if room_id is None or room_id == "":
            raise ValidationError("roomId is required", "MISSING_ROOM_ID")
        validate_month(month)
        room_pk = parse_id(room_id, "INVALID_ROOM_ID")

        room = await self._room_repo.get(pk=room_pk)
        if not room:
            raise NotFoundError("Room not found", "ROOM_NOT_FOUND")

        figures = calculations.compute_reading(last_month, this_month, price_per_unit)
        self._warn_on_negative_usage(room.room_number, month, figures)

        reading, created = await self._reading_repo.upsert(
            room.id, month, reading_fields(figures)
        )
        logger.info(
            f"{'Created' if created else 'Updated'} reading for room "
            f"{room.room_number} in {month}: usage={figures.usage}."
        )
        return reading, created

    async def update_reading(
        self,
        reading_id: int,
        last_month: object = None,
        this_month: object = None,
        price_per_unit: object = None,
    ) -> WaterReading:
        """Edits a reading; omitted values keep what is stored."""
        reading = await self.get_reading(reading_id)
        figures = calculations.compute_reading(
            reading.last_month if last_month is None else last_month,
            reading.this_month if this_month is None else this_month,
            reading.price_per_unit if price_per_unit is None else price_per_unit,
        )
        self._warn_on_negative_usage(str(reading.room_id), reading.month, figures)
        return await self._reading_repo.update(reading, **reading_fields(figures))

    async def delete_reading(self, reading_id: int) -> WaterReading:
        reading = await self.get_reading(reading_id)
        await reading.delete()
        logger.info(f"Deleted reading {reading_id} ({reading.month}).")
        return reading

    @staticmethod
    def _warn_on_negative_usage(
        room_label: str, month: str, figures: calculations.ReadingFigures
    ) -> None:
        if figures.usage < 0:
            logger.warning(
                f"Negative usage {figures.usage} for room {room_label} in {month} "
                f"(previous={figures.previous}, current={figures.current})."
            )
