"""Environment-driven configuration for the HackOps service.

Every knob the service reads lives on ``AppSettings``. Values come from the
process environment first and then from ``.env``/``.env.local`` so a developer
can boot the API locally without exporting anything.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Collections that can be mirrored to the hosted table API.
COLLECTIONS = ("todos", "budget", "hardware", "participants", "reservations", "teams")


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "HackOps"
    LOG_LEVEL: str = "INFO"

    BASE_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2])
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2] / "data")

    # Local storage database. Left empty, it resolves to a SQLite file in DATA_DIR.
    DB_URL: str = Field(default="", validation_alias=AliasChoices("DB_URL", "DATABASE_URL"))

    # ---- Hosted table API (PostgREST-style)
    REMOTE_URL: str = ""
    REMOTE_API_KEY: str = ""
    REMOTE_TIMEOUT: float = 10.0
    # Comma separated; parsed by ``remote_entities``.
    REMOTE_ENTITIES: str = "todos,hardware"

    # "derived" computes available units from reservations on read, "stored"
    # keeps an ``available`` counter on every hardware record.
    HARDWARE_AVAILABILITY: Literal["stored", "derived"] = "derived"

    # ---- Identity provider tokens
    JWT_SECRET: str = "change-me"
    JWT_AUDIENCE: str | None = None
    JWT_ISSUER: str | None = None
    AUTH_REQUIRED: bool = False

    HOST: str = "0.0.0.0"
    PORT: int = 8090

    @property
    def remote_enabled(self) -> bool:
        return bool(self.REMOTE_URL.strip())

    @property
    def remote_entities(self) -> list[str]:
        return [item for item in self.REMOTE_ENTITIES.split(",") if item]

    @field_validator("REMOTE_ENTITIES", mode="before")
    @classmethod
    def parse_remote_entities(cls, value: Any) -> str:
        if value in (None, "", []):
            return ""
        if isinstance(value, str):
            items = [item.strip().lower() for item in value.split(",") if item.strip()]
        elif isinstance(value, Iterable):
            items = [str(item).strip().lower() for item in value if str(item).strip()]
        else:
            raise TypeError("REMOTE_ENTITIES must be a comma separated string or list")
        unknown = [item for item in items if item not in COLLECTIONS]
        if unknown:
            raise ValueError(f"unknown collections in REMOTE_ENTITIES: {', '.join(unknown)}")
        return ",".join(items)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    if not settings.DB_URL:
        settings.DB_URL = f"sqlite:///{settings.DATA_DIR / 'hackops.db'}"
    return settings


settings = get_settings()
