"""Application configuration."""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Loads and validates application settings from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    DEFAULT_PRICE_PER_UNIT: Decimal = Decimal("5.0")
    ADMIN_USERS: list[str] = []
    MAX_PAGE_SIZE: int = 100
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]


settings = Settings()
