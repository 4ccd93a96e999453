"""
mongo_api.api

API package for the Mongo-backed server.

Responsibilities:
- FastAPI app factory, middleware and router modules.
- API-layer dependency wiring.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + delegation to storage.
