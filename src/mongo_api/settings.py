"""
mongo_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Read the plain `PORT` / `MONGO_URL` variables (no prefix) plus `.env` files.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORT = 6001

# 30 MiB, matching the JSON/urlencoded body limit the server has always used.
DEFAULT_BODY_LIMIT_BYTES = 30 * 1024 * 1024


def _default_static_dir() -> Path:
    return Path(__file__).resolve().parent / "public" / "assets"


class Settings(BaseSettings):
    """
    - Strict env-driven configuration
    - Defaults safe for local dev
    - Single settings object injected into the app and the startup sequencer
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "mongo-api"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    # Persistence. Left optional so a missing URL surfaces as a storage
    # connection failure at startup rather than a settings crash.
    mongo_url: str | None = Field(default=None, repr=False)
    mongo_db_name: str | None = None

    # HTTP surface
    body_limit_bytes: int = DEFAULT_BODY_LIMIT_BYTES
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    content_security_policy: str | None = None
    static_dir: Path = Field(default_factory=_default_static_dir)
    static_mount_path: str = "/assets"

    # Startup
    park_on_storage_failure: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `mongo_url` is hidden from repr; log it through `db.client.redact_url` only.
