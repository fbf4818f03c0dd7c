"""Service for exporting and importing monthly readings."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from condowater.core.calculations import ZERO, round_half_up
from condowater.core.dates import following_month, format_month_for_display, validate_month
from condowater.core.errors import WaterBillingError
from condowater.core.repositories.reading import ReadingRepository
from condowater.core.repositories.room import RoomRepository
from condowater.services.readings import ReadingService

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "roomNumber",
    "ownerName",
    "lastMonth",
    "thisMonth",
    "usage",
    "pricePerUnit",
    "totalPrice",
]


@dataclass
class ImportReport:
    """Outcome of a CSV import."""

    imported: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


def _plain(value: Decimal) -> str:
    """Formats a stored decimal without exponent notation."""
    return format(Decimal(value), "f")


class ExportService:
    """Handles CSV exchange and the printable monthly sheet."""

    def __init__(
        self,
        room_repo: RoomRepository,
        reading_repo: ReadingRepository,
        reading_service: ReadingService,
    ):
        self._room_repo = room_repo
        self._reading_repo = reading_repo
        self._reading_service = reading_service
        template_dir = Path(__file__).parent.parent / "templates"
        self._env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html"]),
        )

    async def export_csv(self, month: str | None) -> str:
        """Renders the readings of a month as CSV text."""
        validate_month(month)
        readings = await self._reading_repo.get_for_month_with_rooms(month)

        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=CSV_COLUMNS, lineterminator="\n")
        writer.writeheader()
        for reading in readings:
            writer.writerow(
                {
                    "roomNumber": reading.room.room_number,
                    "ownerName": reading.room.owner_name,
                    "lastMonth": _plain(reading.last_month),
                    "thisMonth": _plain(reading.this_month),
                    "usage": _plain(reading.usage),
                    "pricePerUnit": _plain(reading.price_per_unit),
                    "totalPrice": _plain(reading.total_price),
                }
            )
        return buf.getvalue()

    async def import_csv(self, month: str | None, text: str) -> ImportReport:
        """
        Records readings for ``month`` from CSV text.

        Rows without ``roomNumber`` or ``thisMonth`` are skipped. Room numbers
        are matched without regard to case; rows naming an unknown room, or
        holding invalid numbers, are counted as failed and the import goes on.
        Derived columns in the file are ignored and recomputed.
        """
        validate_month(month)
        report = ImportReport()
        reader = csv.DictReader(io.StringIO(text))

        for line_no, row in enumerate(reader, start=2):
            room_number = (row.get("roomNumber") or "").strip()
            this_month = (row.get("thisMonth") or "").strip()
            if not room_number or not this_month:
                report.skipped += 1
                continue

            room = await self._room_repo.get_by_number_ci(room_number)
            if not room:
                report.failed += 1
                report.errors.append(f"line {line_no}: room {room_number} not found")
                continue

            try:
                await self._reading_service.save_reading(
                    room_id=room.id,
                    month=month,
                    last_month=row.get("lastMonth"),
                    this_month=this_month,
                    price_per_unit=row.get("pricePerUnit"),
                )
            except WaterBillingError as e:
                report.failed += 1
                report.errors.append(f"line {line_no}: {e.message}")
                continue
            report.imported += 1

        logger.info(
            f"CSV import for {month}: {report.imported} imported, "
            f"{report.skipped} skipped, {report.failed} failed."
        )
        return report

    async def render_sheet(self, month: str | None) -> str:
        """Renders a printable HTML sheet of the month's readings."""
        validate_month(month)
        readings = await self._reading_repo.get_for_month_with_rooms(month)
        template = self._env.get_template("monthly_sheet.html")

        total_usage = sum((r.usage for r in readings), ZERO)
        total_price = sum((r.total_price for r in readings), ZERO)
        return template.render(
            period=format_month_for_display(month),
            next_period=format_month_for_display(following_month(month)),
            readings=readings,
            total_usage=round_half_up(total_usage),
            total_price=round_half_up(total_price),
        )
