"""Request middleware for NIK-PARSE.

Provides request logging and metrics middleware.
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from nik_parse.logging.setup import get_logger, set_request_id
from nik_parse.metrics.collectors import (
    ACTIVE_REQUESTS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
)

logger = get_logger(__name__)

# Metric endpoint labels; any other path is counted as OTHER_ENDPOINT
KNOWN_ENDPOINTS = frozenset(
    {
        "/",
        "/health",
        "/metrics",
        "/api/nik/parse",
        "/api/visitors",
        "/docs",
        "/redoc",
        "/openapi.json",
    }
)
OTHER_ENDPOINT = "other"


def get_client_ip(request: Request) -> str:
    """Get the origin address of a request.

    Checks X-Forwarded-For (first hop), then X-Real-IP, then the socket peer.

    Args:
        request: The incoming request.

    Returns:
        Client IP address, or "unknown".
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and metrics.

    Adds request_id to all requests and logs request start/completion.
    Also records Prometheus metrics for request latency and count.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = str(uuid.uuid4())[:8]
        set_request_id(request_id)
        request.state.request_id = request_id

        endpoint = self._get_endpoint(request)
        method = request.method

        ACTIVE_REQUESTS.inc()

        # Query strings are not logged; they may carry a NIK
        start_time = time.time()
        logger.info(
            "Request started",
            extra={
                "event": "request_started",
                "method": method,
                "path": str(request.url.path),
                "client_ip": get_client_ip(request),
            },
        )

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.exception(
                "Request failed with exception",
                extra={
                    "event": "request_error",
                    "error": str(e),
                },
            )
            raise
        finally:
            duration = time.time() - start_time

            ACTIVE_REQUESTS.dec()

            status_str = str(status_code)
            REQUEST_LATENCY.labels(
                method=method,
                endpoint=endpoint,
                status=status_str,
            ).observe(duration)
            REQUEST_COUNT.labels(
                method=method,
                endpoint=endpoint,
                status=status_str,
            ).inc()

            logger.info(
                "Request completed",
                extra={
                    "event": "request_completed",
                    "method": method,
                    "path": str(request.url.path),
                    "status_code": status_code,
                    "duration_ms": round(duration * 1000, 2),
                },
            )

        response.headers["X-Request-ID"] = request_id
        return response

    def _get_endpoint(self, request: Request) -> str:
        """Endpoint label for metrics; unknown paths share one label."""
        path = request.url.path.rstrip("/") or "/"
        return path if path in KNOWN_ENDPOINTS else OTHER_ENDPOINT
