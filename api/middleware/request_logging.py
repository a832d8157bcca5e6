"""Middleware that logs every request with its path and outcome."""

import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per request.

    The path is attached as the request_path extra so the JSON formatter
    emits it as its own field.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        extra = {"request_path": request.url.path}

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception(f"{request.method} {request.url.path} failed", extra=extra)
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f}ms)",
            extra=extra,
        )
        return response
