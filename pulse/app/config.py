"""Application configuration with environment variable support.

All settings can be overridden via environment variables prefixed with ``PULSE_``,
or via a ``.env`` file in the project root.

Examples::

    PULSE_PORT=9000 pulse serve
    PULSE_DATABASE_URL=postgresql+asyncpg://pulse:pulse@db/pulse pulse serve
    PULSE_CORS_ORIGINS=http://localhost:5173,https://chat.example.com pulse serve
    PULSE_CHANNEL_NAME_POLICY=slug pulse serve
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Project root: three levels up from this file (pulse/app/config.py -> repo/)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent

ChannelNamePolicy = Literal["trim", "slug"]


class Settings(BaseSettings):
    """Pulse configuration; every value is overridable via env vars."""

    model_config = SettingsConfigDict(
        env_prefix="PULSE_",
        env_file=str(_BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Storage
    data_dir: Path = _BASE_DIR / "data"
    database_url: str | None = None
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_timeout: float = 30.0

    # Credentials
    jwt_secret: str = "changeme"
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None

    # Cross-origin allow-list
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "https://ryo-pulse-colab-tool.vercel.app",
        ]
    )

    # Channels: "trim" keeps the name as typed (whitespace stripped),
    # "slug" lowercases and collapses it into a URL-friendly slug.
    channel_name_policy: ChannelNamePolicy = "trim"

    # Messages & reactions
    message_history_default_limit: int = 50
    message_history_max_limit: int = 100
    message_content_max_length: int = 4000
    reaction_emoji_max_length: int = 16

    # Logging
    log_level: str = "INFO"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [origin.strip().rstrip("/") for origin in value.split(",") if origin.strip()]
        return value

    @property
    def db_path(self) -> Path:
        return self.data_dir / "pulse.db"

    @property
    def storage_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.db_path}"

    @property
    def uses_sqlite(self) -> bool:
        return self.storage_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# Singleton instance, import this everywhere
settings = get_settings()
