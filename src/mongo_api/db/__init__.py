"""
mongo_api.db

Persistence package (MongoDB via pymongo's asyncio API).

Responsibilities:
- Build the client from settings and prove connectivity before serving.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Collections/repositories live next to the routers that need them; this package
# only owns the connection lifecycle.
