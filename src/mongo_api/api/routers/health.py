"""
mongo_api.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with MongoDB connectivity validation.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from mongo_api.api.deps import mongo_db
from mongo_api.observability.logging import get_logger

router = APIRouter()
log = get_logger(__name__)


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(db: AsyncDatabase[dict[str, Any]] = Depends(mongo_db)) -> dict[str, str]:
    # Readiness: verify the storage backend still answers.
    try:
        await db.command("ping")
    except PyMongoError as exc:
        log.warning("readiness_ping_failed", error=str(exc))
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Storage unreachable"
        ) from exc
    return {"status": "ready", "database": db.name}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
