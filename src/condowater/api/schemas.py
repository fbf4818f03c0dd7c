"""Request bodies and JSON serializers for the HTTP API."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from condowater.core.models import Room, WaterReading
from condowater.services.rollover import RolloverResult
from condowater.services.summary import MonthlySummary, UsageRecord

# Numbers may arrive as JSON numbers or numeric strings. Values are passed
# through untouched; the calculator coerces them and rejects booleans and
# other non-numeric input itself.
NumberLike = Any


class RoomCreateRequest(BaseModel):
    roomNumber: Any = None
    ownerName: Any = None


class RoomUpdateRequest(BaseModel):
    roomNumber: Any = None
    ownerName: Any = None


class ReadingWriteRequest(BaseModel):
    roomId: Any = None
    month: str | None = None
    lastMonth: NumberLike = None
    thisMonth: NumberLike = None
    pricePerUnit: NumberLike = None


class ReadingUpdateRequest(BaseModel):
    lastMonth: NumberLike = None
    thisMonth: NumberLike = None
    pricePerUnit: NumberLike = None


def _num(value: Decimal | float | int) -> float:
    return float(value)


def _ts(value) -> str | None:
    return value.isoformat() if value else None


def serialize_room(room: Room) -> dict[str, Any]:
    return {
        "id": room.id,
        "roomNumber": room.room_number,
        "ownerName": room.owner_name,
        "createdAt": _ts(room.created_at),
        "updatedAt": _ts(room.updated_at),
    }


def serialize_reading(reading: WaterReading) -> dict[str, Any]:
    return {
        "id": reading.id,
        "roomId": reading.room_id,
        "month": reading.month,
        "lastMonth": _num(reading.last_month),
        "thisMonth": _num(reading.this_month),
        "usage": _num(reading.usage),
        "pricePerUnit": _num(reading.price_per_unit),
        "totalPrice": _num(reading.total_price),
        "createdAt": _ts(reading.created_at),
        "updatedAt": _ts(reading.updated_at),
    }


def _serialize_usage(record: UsageRecord) -> dict[str, Any]:
    return {
        "usage": _num(record.usage),
        "roomId": record.room_id,
        "roomNumber": record.room_number,
        "ownerName": record.owner_name,
    }


def serialize_summary(summary: MonthlySummary) -> dict[str, Any]:
    return {
        "month": summary.month,
        "totalRooms": summary.total_rooms,
        "totalUsage": _num(summary.total_usage),
        "totalRevenue": _num(summary.total_revenue),
        "averageUsage": _num(summary.average_usage),
        "averagePrice": _num(summary.average_price),
        "maxUsage": _serialize_usage(summary.max_usage),
        "minUsage": _serialize_usage(summary.min_usage),
        "readingsCount": summary.readings_count,
    }


def serialize_rollover(result: RolloverResult) -> dict[str, Any]:
    return {
        "message": "Water readings rolled over successfully",
        "fromMonth": result.from_month,
        "toMonth": result.to_month,
        "count": result.count,
    }
