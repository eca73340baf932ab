# Middleware package init
"""
Resourceful — Middleware Package
==================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Access Log] → Resource Route

    1. Request ID: set the correlation ID every log record carries
    2. Access Log: one line per request with the dispatched Controller.action

Responses unwind in reverse, so the access log sees the final status code
and the request ID middleware stamps the X-Request-ID header last.
"""

from resourceful.middleware.logging import RequestLoggingMiddleware
from resourceful.middleware.request_id import RequestIDFilter, RequestIDMiddleware, request_id_var

__all__ = ["RequestIDFilter", "RequestIDMiddleware", "RequestLoggingMiddleware", "request_id_var"]
