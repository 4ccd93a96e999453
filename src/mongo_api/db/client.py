"""
mongo_api.db.client

MongoDB client helpers.

Responsibilities:
- Create the async client from settings.
- Establish the connection (`ping`) and translate any failure into
  `StorageConnectionError`.
- Resolve the database handle used by request dependencies.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit, urlunsplit

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from mongo_api.errors import StorageConnectionError
from mongo_api.observability.logging import get_logger
from mongo_api.settings import Settings

log = get_logger(__name__)

# Database used when neither the URL nor MONGO_DB_NAME names one.
FALLBACK_DB_NAME = "test"


def redact_url(url: str | None) -> str | None:
    """Mask the password part of a connection string for logs."""
    if not url:
        return url
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<unparseable>"
    if parts.password is None:
        return url
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


def create_client(settings: Settings) -> AsyncMongoClient[dict[str, Any]]:
    if not settings.mongo_url:
        raise StorageConnectionError("MONGO_URL is not set")
    # The client connects lazily; `connect_storage` forces the first round trip.
    return AsyncMongoClient(settings.mongo_url, appname=settings.service_name)


async def connect_storage(settings: Settings) -> AsyncMongoClient[dict[str, Any]]:
    """
    Open the client and run `ping` against `admin`.

    Raises:
        StorageConnectionError: for any failure, chained to the driver error.
    """
    url = redact_url(settings.mongo_url)
    log.info("storage_connecting", mongo_url=url)

    try:
        client = create_client(settings)
    except StorageConnectionError:
        raise
    except Exception as exc:
        raise StorageConnectionError(f"invalid MongoDB configuration: {exc}", url=url) from exc

    try:
        await client.admin.command("ping")
    except Exception as exc:
        await client.close()
        raise StorageConnectionError(f"MongoDB ping failed: {exc}", url=url) from exc

    log.info("storage_connected", mongo_url=url)
    return client


def database_from_client(
    client: AsyncMongoClient[dict[str, Any]], settings: Settings
) -> AsyncDatabase[dict[str, Any]]:
    if settings.mongo_db_name:
        return client[settings.mongo_db_name]
    return client.get_default_database(default=FALLBACK_DB_NAME)


# --- Module Notes -----------------------------------------------------------
# No connect timeout is layered on top of the driver: pymongo's own
# serverSelectionTimeoutMS (URL option) bounds the `ping`.
