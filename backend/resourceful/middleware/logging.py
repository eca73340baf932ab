"""
Resourceful — Access Log Middleware
=====================================

What:  One access line per request naming the resource controller and the
       action it dispatched to, with status, duration and request ID.
How:   The resource router records `resource` and `action` on
       request.state; this middleware reads them back once the response is
       ready and picks a level from the status class.
Who:   Applied to every request by create_app(), inside RequestIDMiddleware.

Line format:
    GET /articles/9 200 1.3ms RecordingController.show [a1b2c3d4]
    DELETE /articles 404 0.8ms RecordingController.- [e5f6a7b8]   (routing miss)
    GET /elsewhere 404 0.2ms - [c9d0e1f2]                          (no resource)

Levels:
    5xx → ERROR
    4xx → WARNING
    2xx/3xx → INFO

Request bodies and Authorization headers are never logged.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from resourceful.middleware.request_id import request_id_var

logger = logging.getLogger("resourceful.access")


def _status_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def dispatch_target(request: Request) -> str:
    """`Controller.action` for a dispatched request, "-" for unrouted paths."""
    resource: Optional[str] = getattr(request.state, "resource", None)
    if resource is None:
        return "-"
    action: Optional[str] = getattr(request.state, "action", None)
    return f"{resource}.{action or '-'}"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs the dispatch outcome of each resource request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        target = dispatch_target(request)
        rid = request_id_var.get("")

        logger.log(
            _status_level(status),
            "%s %s %d %.1fms %s [%s]",
            request.method,
            request.url.path,
            status,
            duration_ms,
            target,
            rid,
            extra={
                "request_id": rid,
                "resource": getattr(request.state, "resource", None),
                "action": getattr(request.state, "action", None),
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )

        return response
