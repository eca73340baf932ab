"""
Resourceful — Custom Exception Hierarchy
==========================================

What:  Package-specific exceptions for the dispatch and response layers.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return an envelope with the matching HTTP status code.
Who:   Raised by the adapters and the dispatcher; caught by global handlers.

Exception Hierarchy:
    ResourcefulError (base)
    ├── InvalidStatusCode          → 500 (status code outside 100-599)
    ├── ResourceNotFoundError      → 404 (default action / routing miss)
    ├── ResponseAlreadySentError   → 500 (send() reached twice)
    └── ConfigurationLockedError   → 500 (behavior registered mid-dispatch)

Malformed request bodies and authorization headers are NOT errors: the
request adapter recovers locally and returns empty/absent values.
"""

from typing import Any, Dict, Optional


class ResourcefulError(Exception):
    """
    Base exception for all Resourceful errors.

    Attributes:
        message:  Description that is safe to return in an API response
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidStatusCode(ResourcefulError):
    """
    Raised when a response status code falls outside 100-599.

    This is a programming/configuration error in the handler that asked for
    the code, so it is never clamped to a valid value. The response adapter
    raises it before any state or header is changed.
    """

    def __init__(
        self,
        status_code: Any,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["status_code"] = status_code
        super().__init__(
            message=f"The HTTP status code is invalid: {status_code}",
            context=ctx,
        )
        self.status_code = status_code


class ResourceNotFoundError(ResourcefulError):
    """
    Raised by the default action when a request maps to no routed handler.

    HTTP: 404 Not Found

    Covers the routing misses of the dispatcher: a method/id combination the
    transition table does not route, an action disabled in the route table,
    or a route table entry naming a handler the controller does not define.
    """

    def __init__(
        self,
        method: Optional[str] = None,
        resource_id: Optional[str] = None,
        action: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = "The requested resource was not found"
        ctx = context or {}
        if method:
            ctx["method"] = method
        if resource_id:
            ctx["resource_id"] = resource_id
        if action:
            ctx["action"] = action
        super().__init__(message=message, context=ctx)
        self.method = method
        self.resource_id = resource_id
        self.action = action


class ResponseAlreadySentError(ResourcefulError):
    """Raised when send() is reached a second time for the same request."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="The response has already been sent",
            context=context,
        )


class ConfigurationLockedError(ResourcefulError):
    """
    Raised when a controller's behavior table is changed after dispatch began.

    Behavior hooks are constructor-time configuration; once route() has run
    the table is read-only for the rest of the controller's life.
    """

    def __init__(
        self,
        action: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if action:
            ctx["action"] = action
        super().__init__(
            message="Dispatcher configuration cannot change once dispatch has started",
            context=ctx,
        )
        self.action = action
