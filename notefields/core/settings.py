"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _postgres_uri_from_env() -> str | None:
    """Build a Postgres URI from component env vars when POSTGRES_HOST is set.

    Lets a deployment keep the database coordinates in POSTGRES_USER/PASSWORD/
    HOST/PORT/DB. Without POSTGRES_HOST the default is a SQLite file inside the
    vault directory (see ``Settings._default_database_url``).
    """
    host = os.getenv("POSTGRES_HOST")
    if not host:
        return None
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    port = os.getenv("POSTGRES_PORT", "5432")
    db = os.getenv("POSTGRES_DB", "notefields")
    return f"postgresql+psycopg://{user}:{password}@{host}:{port}/{db}"


class Settings(BaseSettings):
    """Runtime settings for the application."""

    # Optional direct override (env: DATABASE_URL)
    database_url: str = Field(default="")
    vault_dir: Path = Field(default=Path("/tmp/vault"))
    log_level: str = Field(default="INFO")
    service_name: str = Field(default="notefields")
    environment: str = Field(default="development")
    db_init_attempts: int = Field(default=5, ge=1)
    db_init_delay: float = Field(default=5.0, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _default_database_url(self) -> "Settings":
        if not self.database_url:
            self.database_url = (
                _postgres_uri_from_env() or f"sqlite:///{self.vault_dir / 'notefields.db'}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return application settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
