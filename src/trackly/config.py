"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="TRACKLY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Trackly Schedule API"
    api_prefix: str = "/api"
    bus_server_url: Optional[str] = Field(
        default=None,
        description="Base URL of the bus data server (e.g., http://localhost:9090/buses).",
    )
    bus_server_timeout_seconds: float = Field(default=10.0, gt=0.0)
    bus_server_max_retries: int = Field(default=3, ge=0)
    bus_server_backoff_seconds: float = Field(default=0.5, ge=0.0)
    service_timezone: str = Field(
        default="Asia/Colombo",
        description="Timezone in which schedule HH:MM values are expressed.",
    )
    display_timezone: str = Field(
        default="Asia/Colombo",
        description="Timezone used to render departure/arrival times for clients.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("bus_server_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text.rstrip("/") or None


settings = Settings()
