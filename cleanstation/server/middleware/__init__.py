"""
Middleware modules for the CleanStation server.

This package contains custom middleware for request tracking and logging.
"""

from .request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
