"""Integration tests for the RolloverService."""

import asyncio
from decimal import Decimal

import pytest

from condowater.core.errors import NotFoundError, ValidationError
from condowater.core.models import Room, WaterReading
from condowater.core.repositories.reading import ReadingRepository
from condowater.services.rollover import RolloverService


@pytest.fixture
def rollover_service(db_session) -> RolloverService:
    """Provides a RolloverService instance with a real repository."""
    return RolloverService(reading_repo=ReadingRepository())


async def _reading(room: Room, month: str, last: str, this: str, price: str = "5") -> WaterReading:
    last_d, this_d, price_d = Decimal(last), Decimal(this), Decimal(price)
    return await WaterReading.create(
        room=room,
        month=month,
        last_month=last_d,
        this_month=this_d,
        usage=this_d - last_d,
        price_per_unit=price_d,
        total_price=(this_d - last_d) * price_d,
    )


async def _target_values(month: str) -> dict[int, tuple]:
    readings = await WaterReading.filter(month=month)
    return {
        r.room_id: (r.last_month, r.this_month, r.usage, r.price_per_unit, r.total_price)
        for r in readings
    }


@pytest.mark.asyncio
async def test_rollover_carries_current_into_previous(rollover_service: RolloverService):
    """
    Every room with a reading in the source month gets an opening reading in
    the target month; rooms without one get nothing.
    """
    # --- Arrange ---
    room_a = await Room.create(room_number="101", owner_name="John Doe")
    room_b = await Room.create(room_number="102", owner_name="Jane Smith")
    room_c = await Room.create(room_number="201", owner_name="Michael Johnson")
    await _reading(room_a, "2024-07", "100", "130", "5")
    await _reading(room_b, "2024-07", "200", "240", "6.5")

    # --- Act ---
    result = await rollover_service.rollover("2024-07", "2024-08")

    # --- Assert ---
    assert result.count == 2
    assert result.inserted == 2
    assert result.updated == 0

    target = await _target_values("2024-08")
    assert set(target) == {room_a.id, room_b.id}
    assert target[room_a.id] == (Decimal("130"), 0, 0, Decimal("5"), 0)
    assert target[room_b.id] == (Decimal("240"), 0, 0, Decimal("6.5"), 0)
    assert await WaterReading.filter(room_id=room_c.id).count() == 0

    # Source month is untouched.
    source = await _target_values("2024-07")
    assert source[room_a.id][1] == Decimal("130")


@pytest.mark.asyncio
async def test_rollover_overwrites_existing_target(rollover_service: RolloverService):
    room_a = await Room.create(room_number="101", owner_name="John Doe")
    room_b = await Room.create(room_number="102", owner_name="Jane Smith")
    await _reading(room_a, "2024-07", "100", "130")
    await _reading(room_b, "2024-07", "200", "240")
    existing = await _reading(room_a, "2024-08", "90", "150")

    result = await rollover_service.rollover("2024-07", "2024-08")

    assert result.inserted == 1
    assert result.updated == 1
    assert result.count == 2
    assert await WaterReading.filter(room_id=room_a.id, month="2024-08").count() == 1

    overwritten = await WaterReading.get(id=existing.id)
    assert overwritten.last_month == Decimal("130")
    assert overwritten.this_month == 0
    assert overwritten.usage == 0
    assert overwritten.total_price == 0


@pytest.mark.asyncio
async def test_rollover_is_idempotent(rollover_service: RolloverService):
    room = await Room.create(room_number="101", owner_name="John Doe")
    await _reading(room, "2024-07", "100", "130")

    first = await rollover_service.rollover("2024-07", "2024-08")
    after_first = await _target_values("2024-08")
    second = await rollover_service.rollover("2024-07", "2024-08")
    after_second = await _target_values("2024-08")

    assert first.count == second.count == 1
    assert second.updated == 1
    assert after_first == after_second
    assert await WaterReading.filter(month="2024-08").count() == 1


@pytest.mark.asyncio
async def test_concurrent_rollovers_do_not_duplicate(rollover_service: RolloverService):
    rooms = [
        await Room.create(room_number=str(100 + i), owner_name=f"Owner {i}")
        for i in range(5)
    ]
    for room in rooms:
        await _reading(room, "2024-07", "0", "10")

    results = await asyncio.gather(
        rollover_service.rollover("2024-07", "2024-08"),
        rollover_service.rollover("2024-07", "2024-08"),
    )

    assert [r.count for r in results] == [5, 5]
    assert await WaterReading.filter(month="2024-08").count() == 5
    assert rollover_service._locks == {}


@pytest.mark.asyncio
async def test_rollover_without_source_readings(rollover_service: RolloverService):
    room = await Room.create(room_number="101", owner_name="John Doe")
    await _reading(room, "2024-06", "0", "10")

    with pytest.raises(NotFoundError) as exc_info:
        await rollover_service.rollover("2024-07", "2024-08")

    assert exc_info.value.code == "NO_READINGS_FOUND"
    assert await WaterReading.all().count() == 1
    assert rollover_service._locks == {}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "from_month, to_month, code",
    [
        (None, "2024-08", "MISSING_PARAMETERS"),
        ("2024-07", "", "MISSING_PARAMETERS"),
        ("2024-13", "2024-08", "INVALID_FROM_MONTH_FORMAT"),
        ("24-07", "2024-08", "INVALID_FROM_MONTH_FORMAT"),
        ("2024-07", "2024/08", "INVALID_TO_MONTH_FORMAT"),
    ],
)
async def test_rollover_validates_months(
    rollover_service: RolloverService, from_month, to_month, code
):
    with pytest.raises(ValidationError) as exc_info:
        await rollover_service.rollover(from_month, to_month)
    assert exc_info.value.code == code
