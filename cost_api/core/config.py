from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "cost-api"
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/costs"
    user_service_url: str = ""
    user_service_timeout: float = 5.0
    timezone: str = "UTC"
    auto_run_migrations: bool = True
    log_level: str = "INFO"

    @field_validator("user_service_url", mode="before")
    @classmethod
    def strip_user_service_url(cls, v: str | None) -> str:
        """Treat a missing URL as empty and drop any trailing slash."""
        if v is None:
            return ""
        return str(v).strip().rstrip("/")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"Unknown timezone: {v}") from exc
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def get_sync_database_url(self) -> str:
        """Return a synchronous driver URL for Alembic/CLI usage."""

        if "+asyncpg" in self.database_url:
            return self.database_url.replace("+asyncpg", "+psycopg")
        if "+aiosqlite" in self.database_url:
            return self.database_url.replace("+aiosqlite", "")
        return self.database_url


class AppConfig(BaseModel):
    version: str = "0.1.0"
    description: str = "Cost tracking API with cached monthly category reports."


@lru_cache
def get_settings() -> Settings:
    return Settings()
