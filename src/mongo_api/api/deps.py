"""
mongo_api.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and the MongoDB database.
- Encapsulate app.state access patterns (client attached by the startup sequencer).
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, HTTPException, Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from mongo_api.db.client import database_from_client
from mongo_api.settings import Settings


def settings_from_app(request: Request) -> Settings:
    # The app is built with an explicit Settings object; prefer it over env re-reads.
    return request.app.state.settings  # type: ignore[attr-defined]


def mongo_client(request: Request) -> AsyncMongoClient[dict[str, Any]]:
    # Attached by `mongo_api.startup.StartupSequencer` after a successful connect.
    client = getattr(request.app.state, "mongo_client", None)
    if client is None:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Storage not connected"
        )
    return client


def mongo_db(
    client: AsyncMongoClient[dict[str, Any]] = Depends(mongo_client),
    settings: Settings = Depends(settings_from_app),
) -> AsyncDatabase[dict[str, Any]]:
    return database_from_client(client, settings)


# --- Module Notes -----------------------------------------------------------
# The listener only opens after the client is attached, so the 503 branch is only
# reachable when the app is driven directly (tests, embedding).
