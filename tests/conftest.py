"""
tests.conftest

Shared fixtures: isolated settings and in-memory stand-ins for the MongoDB client.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from mongo_api.settings import Settings

_ENV_VARS = (
    "PORT",
    "HOST",
    "MONGO_URL",
    "MONGO_DB_NAME",
    "ENV",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "BODY_LIMIT_BYTES",
    "CORS_ALLOW_ORIGINS",
    "STATIC_DIR",
    "PARK_ON_STORAGE_FAILURE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        mongo_url="mongodb://localhost:27017/app",
        static_dir=tmp_path / "assets",
        park_on_storage_failure=False,
    )


class FakeDatabase:
    def __init__(self, name: str, *, ping_error: Exception | None = None) -> None:
        self.name = name
        self.commands: list[str] = []
        self._ping_error = ping_error

    async def command(self, name: str) -> dict[str, Any]:
        self.commands.append(name)
        if self._ping_error is not None:
            raise self._ping_error
        return {"ok": 1.0}


class FakeMongoClient:
    def __init__(self, *, default_db: str = "app", ping_error: Exception | None = None) -> None:
        self.admin = FakeDatabase("admin", ping_error=ping_error)
        self._default_db = default_db
        self._ping_error = ping_error
        self.closed = False

    def get_default_database(self, default: str | None = None) -> FakeDatabase:
        return FakeDatabase(self._default_db or default or "test", ping_error=self._ping_error)

    def __getitem__(self, name: str) -> FakeDatabase:
        return FakeDatabase(name, ping_error=self._ping_error)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeMongoClient:
    return FakeMongoClient()
