"""
Request logging middleware.

Logs method, path, status and latency for every request.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per completed request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            latency_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.error(f"{request.method} {request.url.path} failed after {latency_ms}ms: {e}")
            raise

        latency_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(f"{request.method} {request.url.path} {response.status_code} {latency_ms}ms")
        return response
