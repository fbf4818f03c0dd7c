"""Domain models for the condo water billing application."""

from __future__ import annotations

from tortoise import fields, models


class BaseModel(models.Model):
    """Abstract base model with common fields."""

    id = fields.IntField(pk=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        abstract = True


class Room(BaseModel):
    """A condo unit billed for its water usage."""

    room_number = fields.CharField(max_length=50, unique=True)
    owner_name = fields.CharField(max_length=255)

    readings: fields.ReverseRelation[WaterReading]

    class Meta:
        table = "rooms"
        ordering = ["id"]

    def __str__(self) -> str:
        return f"Room {self.room_number} ({self.owner_name})"


class WaterReading(BaseModel):
    """Meter values and the resulting charge of one room for one month."""

    month = fields.CharField(max_length=7, index=True)  # e.g. "2024-07"
    last_month = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    this_month = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    usage = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    price_per_unit = fields.DecimalField(max_digits=10, decimal_places=4)
    total_price = fields.DecimalField(max_digits=14, decimal_places=2, default=0)
    room: fields.ForeignKeyRelation[Room] = fields.ForeignKeyField(
        "models.Room", related_name="readings", on_delete=fields.CASCADE
    )

    room_id: int

    class Meta:
        table = "water_readings"
        unique_together = ("room", "month")
        ordering = ["room_id"]

    def __str__(self) -> str:
        return f"Reading for room {self.room_id} in {self.month}: {self.usage}"
