"""Monthly statistics over all rooms."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from condowater.core.calculations import ZERO, round_half_up
from condowater.core.dates import validate_month
from condowater.core.errors import NotFoundError
from condowater.core.models import Room, WaterReading
from condowater.core.repositories.reading import ReadingRepository


@dataclass(frozen=True)
class UsageRecord:
    """Usage of one room, used for the highest and lowest consumer."""

    usage: Decimal
    room_id: int
    room_number: str
    owner_name: str


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    total_rooms: int
    readings_count: int
    total_usage: Decimal
    total_revenue: Decimal
    average_usage: Decimal
    average_price: Decimal
    max_usage: UsageRecord
    min_usage: UsageRecord


def _record(room: Room, reading: WaterReading) -> UsageRecord:
    return UsageRecord(
        usage=Decimal(reading.usage),
        room_id=room.id,
        room_number=room.room_number,
        owner_name=room.owner_name,
    )


def summarize(month: str, rows: Iterable[tuple[Room, WaterReading]]) -> MonthlySummary:
    """
    Aggregates the readings of one month.

    Averages are taken per distinct room. When several rooms share the
    highest or lowest usage, the first one in ``rows`` wins.

    Raises:
        NotFoundError: if ``rows`` is empty.
    """
    rows = list(rows)
    if not rows:
        raise NotFoundError(
            "No readings found for the specified month", "NO_READINGS_FOUND"
        )

    room_ids: set[int] = set()
    total_usage = ZERO
    total_revenue = ZERO
    max_row = min_row = rows[0]
    for room, reading in rows:
        room_ids.add(room.id)
        total_usage += Decimal(reading.usage)
        total_revenue += Decimal(reading.total_price)
        if reading.usage > max_row[1].usage:
            max_row = (room, reading)
        if reading.usage < min_row[1].usage:
            min_row = (room, reading)

    total_rooms = len(room_ids)
    return MonthlySummary(
        month=month,
        total_rooms=total_rooms,
        readings_count=len(rows),
        total_usage=round_half_up(total_usage),
        total_revenue=round_half_up(total_revenue),
        average_usage=round_half_up(total_usage / total_rooms),
        average_price=round_half_up(total_revenue / total_rooms),
        max_usage=_record(*max_row),
        min_usage=_record(*min_row),
    )


class SummaryService:
    """Loads a month's readings and aggregates them."""

    def __init__(self, reading_repo: ReadingRepository):
        self._reading_repo = reading_repo

    async def monthly_summary(self, month: str | None) -> MonthlySummary:
        validate_month(month)
        readings = await self._reading_repo.get_for_month_with_rooms(month)
        return summarize(month, ((reading.room, reading) for reading in readings))
