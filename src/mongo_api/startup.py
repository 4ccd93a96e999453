"""
mongo_api.startup

Connect-then-listen startup sequencing.

Responsibilities:
- Connect to MongoDB before anything listens on the network.
- Open the HTTP listener (uvicorn) only after the connection succeeds.
- On connection failure: log the cause, never open the listener, keep the
  process alive (no retry, no exit).
- Report a listener that fails to come up as FAILED as well.
"""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from socket import socket
from typing import Any, Protocol

import uvicorn
from fastapi import FastAPI

from mongo_api.api.app import create_app
from mongo_api.db.client import connect_storage
from mongo_api.errors import ListenerStartupError, MongoApiError, StorageConnectionError
from mongo_api.observability.logging import get_logger
from mongo_api.settings import Settings

log = get_logger(__name__)


class StartupState(enum.StrEnum):
    # STARTING is the only non-terminal state.
    starting = "STARTING"
    serving = "SERVING"
    failed = "FAILED"


@dataclass(slots=True)
class StartupOutcome:
    state: StartupState
    port: int
    error: MongoApiError | None = None


class Server(Protocol):
    async def serve(self, sockets: list[socket] | None = None) -> None: ...


Connector = Callable[[Settings], Awaitable[Any]]
ServerFactory = Callable[..., Server]


class AnnouncingServer(uvicorn.Server):
    """uvicorn server that reports once its sockets are bound."""

    def __init__(
        self, config: uvicorn.Config, *, on_listening: Callable[[int], None] | None = None
    ) -> None:
        super().__init__(config)
        self._on_listening = on_listening

    async def startup(self, sockets: list[socket] | None = None) -> None:
        await super().startup(sockets=sockets)
        if self.started and self._on_listening is not None:
            self._on_listening(self.bound_port())

    def bound_port(self) -> int:
        # Differs from config.port when binding to port 0.
        for server in self.servers:
            for sock in server.sockets:
                return sock.getsockname()[1]
        return self.config.port


def build_server(
    app: FastAPI,
    settings: Settings,
    *,
    on_listening: Callable[[int], None] | None = None,
) -> AnnouncingServer:
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,  # structlog
    )
    return AnnouncingServer(config, on_listening=on_listening)


class StartupSequencer:
    """
    Single pass: STARTING -> SERVING | FAILED.

    `connect` and `server_factory` are injectable so the ordering can be
    exercised without a database or a real socket.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        app: FastAPI | None = None,
        connect: Connector = connect_storage,
        server_factory: ServerFactory = build_server,
    ) -> None:
        self._settings = settings
        # Middleware/routers are registered up front; only listening waits on storage.
        self.app = app if app is not None else create_app(settings=settings)
        self._connect = connect
        self._server_factory = server_factory
        self.state = StartupState.starting
        self._bound_port: int | None = None

    async def run(self) -> StartupOutcome:
        port = self._settings.port
        try:
            # Only suspension point before serving. Not cancelled, not timed out.
            client = await self._connect(self._settings)
        except Exception as exc:
            if isinstance(exc, StorageConnectionError):
                error = exc
            else:
                error = StorageConnectionError(str(exc))
                error.__cause__ = exc
            self.state = StartupState.failed
            log.error(
                "storage_connect_failed",
                error=str(error),
                cause=repr(error.__cause__) if error.__cause__ is not None else None,
                mongo_url=error.url,
            )
            return StartupOutcome(state=self.state, port=port, error=error)

        self.app.state.mongo_client = client
        server = self._server_factory(self.app, self._settings, on_listening=self._listening)
        try:
            await server.serve()
        except SystemExit as exc:
            # uvicorn exits the process when it cannot bind.
            return await self._listener_failed(port, f"listener exited with status {exc.code}")
        if self.state is StartupState.starting:
            # serve() returned without binding, e.g. the lifespan startup failed.
            return await self._listener_failed(port, "listener did not start")
        return StartupOutcome(state=self.state, port=self._bound_port or port)

    def _listening(self, port: int) -> None:
        self.state = StartupState.serving
        self._bound_port = port
        log.info("server_listening", port=port)

    async def _listener_failed(self, port: int, message: str) -> StartupOutcome:
        self.state = StartupState.failed
        error = ListenerStartupError(message, port=port)
        log.error("server_start_failed", error=message, port=port)
        client = getattr(self.app.state, "mongo_client", None)
        if client is not None:
            await client.close()
            self.app.state.mongo_client = None
        return StartupOutcome(state=self.state, port=port, error=error)


async def park() -> None:
    # Non-serving but alive until the process is signalled.
    await asyncio.Event().wait()


async def start(settings: Settings, *, sequencer: StartupSequencer | None = None) -> StartupOutcome:
    sequencer = sequencer or StartupSequencer(settings)
    outcome = await sequencer.run()
    storage_failed = isinstance(outcome.error, StorageConnectionError)
    if storage_failed and settings.park_on_storage_failure:
        log.warning("startup_parked", port=outcome.port)
        await park()
    return outcome


# --- Module Notes -----------------------------------------------------------
# `server_listening` is emitted from uvicorn's startup hook, i.e. after the
# sockets are bound, not when `serve()` is called.
