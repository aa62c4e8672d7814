"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on vendors.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access / Vendors)
"""

from .comment_handler import CommentHandler, to_http_exception

__all__ = [
    "CommentHandler",
    "to_http_exception",
]
