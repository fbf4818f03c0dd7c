"""Routes for water readings, monthly rollover and reports."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, Response

from condowater.api import deps
from condowater.api.deps import AdminUser
from condowater.api.schemas import (
    ReadingUpdateRequest,
    ReadingWriteRequest,
    serialize_reading,
    serialize_rollover,
    serialize_summary,
)
from condowater.core.errors import ValidationError
from condowater.services.readings import parse_id

router = APIRouter(prefix="/api/water-readings", tags=["water-readings"])

reading_service = deps.reading_service
rollover_service = deps.rollover_service
summary_service = deps.summary_service
export_service = deps.export_service


@router.get("")
async def get_readings(
    id: str | None = None, month: str | None = None
) -> dict[str, Any] | list[dict[str, Any]]:
    """Returns one reading by ``id`` or all readings of ``month``."""
    if not id and not month:
        raise ValidationError(
            "Either 'id' or 'month' parameter is required", "MISSING_PARAMETER"
        )
    if id:
        reading = await reading_service.get_reading(parse_id(id))
        return serialize_reading(reading)

    readings = await reading_service.list_for_month(month)
    return [serialize_reading(r) for r in readings]


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_reading(payload: ReadingWriteRequest) -> dict[str, Any]:
    """Creates the reading of a room for a month, or overwrites the existing one."""
    reading, _ = await reading_service.save_reading(
        room_id=payload.roomId,
        month=payload.month,
        last_month=payload.lastMonth,
        this_month=payload.thisMonth,
        price_per_unit=payload.pricePerUnit,
    )
    return serialize_reading(reading)


@router.put("")
async def update_reading(
    payload: ReadingUpdateRequest, id: str | None = None
) -> dict[str, Any]:
    reading = await reading_service.update_reading(
        parse_id(id),
        last_month=payload.lastMonth,
        this_month=payload.thisMonth,
        price_per_unit=payload.pricePerUnit,
    )
    return serialize_reading(reading)


@router.delete("")
async def delete_reading(id: str | None = None) -> dict[str, Any]:
    reading = await reading_service.delete_reading(parse_id(id))
    return {
        "message": "Water reading deleted successfully",
        "deletedReading": serialize_reading(reading),
    }


@router.post("/rollover")
async def rollover(
    user: AdminUser,
    fromMonth: str | None = None,
    toMonth: str | None = None,
) -> dict[str, Any]:
    """Opens ``toMonth`` with the closing values of ``fromMonth``."""
    result = await rollover_service.rollover(fromMonth, toMonth)
    return serialize_rollover(result)


@router.get("/summary")
async def monthly_summary(user: AdminUser, month: str | None = None) -> dict[str, Any]:
    summary = await summary_service.monthly_summary(month)
    return serialize_summary(summary)


@router.get("/export")
async def export_csv(user: AdminUser, month: str | None = None) -> Response:
    text = await export_service.export_csv(month)
    return Response(
        content=text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="water-readings-{month}.csv"'},
    )


@router.post("/import")
async def import_csv(
    request: Request, user: AdminUser, month: str | None = None
) -> dict[str, Any]:
    """Imports readings for ``month`` from a CSV request body."""
    body = await request.body()
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ValidationError("CSV body must be UTF-8 text", "INVALID_CSV") from exc

    report = await export_service.import_csv(month, text)
    return {
        "imported": report.imported,
        "skipped": report.skipped,
        "failed": report.failed,
        "errors": report.errors,
    }


@router.get("/sheet", response_class=HTMLResponse)
async def printable_sheet(user: AdminUser, month: str | None = None) -> HTMLResponse:
    html = await export_service.render_sheet(month)
    return HTMLResponse(content=html)
