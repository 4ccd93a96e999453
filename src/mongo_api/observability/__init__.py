"""
mongo_api.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation and access logs.
"""

# Package marker.
