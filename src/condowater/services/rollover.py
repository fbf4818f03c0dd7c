"""Service that opens a new billing month from the previous one."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from condowater.core import calculations
from condowater.core.dates import validate_month
from condowater.core.errors import NotFoundError, ValidationError
from condowater.core.repositories.reading import ReadingRepository
from condowater.services.readings import reading_fields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RolloverResult:
    """Outcome of one rollover run."""

    from_month: str
    to_month: str
    inserted: int
    updated: int

    @property
    def count(self) -> int:
        return self.inserted + self.updated


class RolloverService:
    """
    Carries every room's closing meter value into the next month.

    For each reading of the source month the target month receives the
    source's current value as its previous value, a zero current value,
    zero usage and charge, and the source's unit price. Rooms without a
    source reading are left alone.
    """

    def __init__(self, reading_repo: ReadingRepository):
        self._reading_repo = reading_repo
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._lock_users: dict[tuple[str, str], int] = {}

    async def rollover(self, from_month: str | None, to_month: str | None) -> RolloverResult:
        """
        Rolls readings from ``from_month`` over into ``to_month``.

        Each target reading is written with a single upsert keyed by
        (room, month); runs for the same pair of months are serialized.
        Writes are not atomic across rooms: if one room fails, rooms written
        before it stay written.

        Raises:
            ValidationError: if a month is missing or malformed.
            NotFoundError: if ``from_month`` has no readings.
        """
        if not from_month or not to_month:
            raise ValidationError(
                "Both fromMonth and toMonth parameters are required",
                "MISSING_PARAMETERS",
            )
        validate_month(
            from_month, invalid_code="INVALID_FROM_MONTH_FORMAT", label="fromMonth"
        )
        validate_month(to_month, invalid_code="INVALID_TO_MONTH_FORMAT", label="toMonth")

        key = (from_month, to_month)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                return await self._rollover(from_month, to_month)
        finally:
            # Drop the lock once no run holds or awaits it.
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def _rollover(self, from_month: str, to_month: str) -> RolloverResult:
        source_readings = await self._reading_repo.get_for_month(from_month)
        if not source_readings:
            raise NotFoundError(
                f"No readings found for month {from_month}", "NO_READINGS_FOUND"
            )

        logger.info(
            f"Rolling over {len(source_readings)} reading(s) "
            f"from {from_month} to {to_month}."
        )
        inserted = updated = 0
        for source in source_readings:
            figures = calculations.carry_forward(source.this_month, source.price_per_unit)
            _, created = await self._reading_repo.upsert(
                source.room_id,
                to_month,
                reading_fields(figures),
            )
            if created:
                inserted += 1
            else:
                updated += 1

        logger.info(
            f"Rollover {from_month} -> {to_month} finished: "
            f"{inserted} inserted, {updated} updated."
        )
        return RolloverResult(
            from_month=from_month, to_month=to_month, inserted=inserted, updated=updated
        )
