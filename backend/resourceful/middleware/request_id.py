"""
Resourceful — Request ID Middleware
=====================================

What:  Assigns an ID to each incoming request and echoes it in the response.
How:   Reuses a client-supplied X-Request-ID or generates a short UUID,
       stores it in a ContextVar and request.state, and adds it to the
       response headers. RequestIDFilter copies the current ID onto every
       log record, including the dispatcher's records emitted from the
       threadpool (run_in_threadpool copies the context).
Who:   Applied to every request by create_app(); the filter is installed on
       the root handler by setup_logging().

Log format:
    2026-01-01T12:00:00 [INFO] [a1b2c3d4] resourceful.rest.controller: ...
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDFilter(logging.Filter):
    """
    Stamp `record.request_id` with the ID of the request being served.

    Records logged outside a request get "-". A request_id passed through
    `extra=` is left alone.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = request_id_var.get("") or "-"
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns an ID to each request for tracing.

    Behavior:
        1. Use the client's X-Request-ID header when present and non-empty
        2. Otherwise generate an 8-character UUID prefix
        3. Store it in request_id_var and request.state.request_id
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
