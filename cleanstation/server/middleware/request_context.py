"""
Request Context Middleware for FastAPI.

Assigns a request id to every request, echoes it in ``X-Request-ID``, adds
``X-Process-Time`` and logs method, path, status and duration.
"""

import time
from typing import Callable
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from cleanstation.core.logging_config import get_logger

logger = get_logger(__name__)

SLOW_REQUEST_MS = 1000


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware tagging requests with an id and logging their timing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process the request and log timing.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/handler

        Returns:
            The HTTP response
        """
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"API request failed: {method} {path}",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "error": str(e),
                },
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.info(f"{method} {path} -> {response.status_code} ({duration_ms:.1f}ms)")
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}"

        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(
                f"Slow API request: {method} {path} took {duration_ms:.2f}ms",
                extra={"request_id": request_id, "method": method, "path": path, "duration_ms": duration_ms},
            )
        return response
