from tortoise import BaseDBAsyncClient


async def upgrade(db: BaseDBAsyncClient) -> str:
    return """
        CREATE TABLE IF NOT EXISTS "rooms" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "updated_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "room_number" VARCHAR(50) NOT NULL UNIQUE,
    "owner_name" VARCHAR(255) NOT NULL
);
COMMENT ON TABLE "rooms" IS 'A condo unit billed for its water usage.';
CREATE TABLE IF NOT EXISTS "water_readings" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "updated_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "month" VARCHAR(7) NOT NULL,
    "last_month" DECIMAL(12,2) NOT NULL DEFAULT 0,
    "this_month" DECIMAL(12,2) NOT NULL DEFAULT 0,
    "usage" DECIMAL(12,2) NOT NULL DEFAULT 0,
    "price_per_unit" DECIMAL(10,4) NOT NULL,
    "total_price" DECIMAL(14,2) NOT NULL DEFAULT 0,
    "room_id" INT NOT NULL REFERENCES "rooms" ("id") ON DELETE CASCADE,
    CONSTRAINT "uid_water_readi_room_id_5c1f0e" UNIQUE ("room_id", "month")
);
CREATE INDEX IF NOT EXISTS "idx_water_readi_month_a3d2b1" ON "water_readings" ("month");
COMMENT ON TABLE "water_readings" IS 'Meter values and the resulting charge of one room for one month.';
CREATE TABLE IF NOT EXISTS "aerich" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "version" VARCHAR(255) NOT NULL,
    "app" VARCHAR(100) NOT NULL,
    "content" JSONB NOT NULL
);"""


async def downgrade(db: BaseDBAsyncClient) -> str:
    return """
        """
