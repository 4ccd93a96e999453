"""
mongo_api.errors

Project exception types.
"""

from __future__ import annotations


class MongoApiError(Exception):
    pass


class StorageConnectionError(MongoApiError):
    """
    The storage backend could not be reached (or was never configured).
    The underlying driver error is chained as `__cause__`.
    """

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ListenerStartupError(MongoApiError):
    """The HTTP listener did not come up after storage connected."""

    def __init__(self, message: str, *, port: int) -> None:
        super().__init__(message)
        self.port = port


# --- Module Notes -----------------------------------------------------------
# Both are produced by the startup sequencer and reported on its outcome.
