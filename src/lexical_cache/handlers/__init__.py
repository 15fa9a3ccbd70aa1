"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on repositories,
and translate service errors into HTTP status codes.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .cache_handler import CacheHandler, to_http_error

__all__ = [
    "CacheHandler",
    "to_http_error",
]
