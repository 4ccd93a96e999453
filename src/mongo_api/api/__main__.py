"""
mongo_api.api.__main__

Entrypoint for running the server via `python -m mongo_api.api` (or `mongo-api`).

Responsibilities:
- Load settings.
- Hand over to the startup sequencer (connect to MongoDB, then listen).
"""

from __future__ import annotations

import asyncio

from mongo_api.errors import ListenerStartupError
from mongo_api.settings import get_settings
from mongo_api.startup import start


def main() -> None:
    settings = get_settings()
    outcome = asyncio.run(start(settings))
    if isinstance(outcome.error, ListenerStartupError):
        # Same exit status uvicorn uses when it cannot bind.
        raise SystemExit(1)


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# uvicorn is driven programmatically (not `uvicorn.run`) so the listener can be
# gated on the storage connection.
