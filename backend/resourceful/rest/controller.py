"""
Resourceful — RESTful Resource Controller
===========================================

What:  Base class that dispatches one request to a CRUD action handler.
How:   route(resource_id) reads the method from the request adapter, picks
       an action from the transition table, runs the action's behavior hook,
       resolves the handler name through the route table and calls it.
Who:   Subclassed by integrators; instantiated once per request by
       resourceful.routes.resource (or by hand, with two adapters).

Extending:
    class ArticleController(RestController):
        def index(self): ...
        def store(self, request_data): ...
        def show(self, resource_id): ...
        def update(self, resource_id, request_data): ...
        def delete(self, resource_id, request_data): ...
        def delete_all(self, request_data): ...   # collection-delete table only

    Handlers that are not defined simply route to the default action (404).
    A handler finishes the request with `return self.json(...)` or
    `return self.response.send()`; it may also just return data, which the
    resource router then sends in the current format.

Configuration contract:
    The DispatcherConfig (route table, envelope field names, transition
    table) is a frozen model shared by all instances of a controller class.
    Behavior hooks belong to one instance, are registered in __init__ (or
    with _set_behavior before the first route() call) and cannot change
    once dispatch has started.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from resourceful.config import settings
from resourceful.exceptions import ConfigurationLockedError, ResourceNotFoundError
from resourceful.http.request import RequestAdapter
from resourceful.http.response import ResponseAdapter
from resourceful.rest.actions import ACTION_SIGNATURES, has_resource_id, select_action
from resourceful.rest.envelope import ABSENT, pack_envelope
from resourceful.schemas.dispatch import Action, DispatcherConfig

logger = logging.getLogger(__name__)

Behavior = Callable[[], Any]

_SCALAR_TYPES = (str, bytes, int, float, bool)


class RestController:
    """
    RESTful dispatcher over a request/response adapter pair.

    Class attributes:
        config:           Dispatch configuration shared by every instance
        response_format:  Format applied to the response at construction
                          (None keeps the response adapter's format)

    Instance attributes:
        dispatched_action: Action the transition table picked in route(),
                           None before dispatch or on a routing miss
    """

    config: DispatcherConfig = DispatcherConfig.from_settings(settings)
    response_format: Optional[str] = None

    def __init__(
        self,
        request: RequestAdapter,
        response: Optional[ResponseAdapter] = None,
        config: Optional[DispatcherConfig] = None,
        behaviors: Optional[Mapping[Union[Action, str], Behavior]] = None,
    ):
        self.request = request
        self.response = response if response is not None else ResponseAdapter()
        if config is not None:
            self.config = config

        self._behaviors: Dict[Action, Optional[Behavior]] = {action: None for action in Action}
        self._dispatching = False
        self._resource_id: Optional[str] = None
        self.dispatched_action: Optional[Action] = None

        for action, behavior in (behaviors or {}).items():
            if not self._set_behavior(action, behavior):
                raise ValueError(f"Unknown action for behavior: {action!r}")

        self.response.set_format(self.response_format or self.response.get_format())

    # ── Entry Points ──────────────────────────────────────────────────────

    def route(self, resource_id: Optional[str] = None) -> Any:
        """
        Dispatch the current request.

        Args:
            resource_id: Path-bound identifier, or None for the collection

        Returns:
            Whatever the handler (or the default action) returns.
        """
        self._dispatching = True
        self._resource_id = resource_id if has_resource_id(resource_id) else None

        method = self.request.method()
        action = select_action(method, self._resource_id, self.config.transition_table)
        self.dispatched_action = action
        if action is None:
            logger.info(
                "No action for %s %s (%s table)",
                method,
                "with id" if self._resource_id is not None else "without id",
                self.config.transition_table.value,
            )
            return self._default_action()

        return self._action(action, *self._arguments(action))

    def api(self, resource_id: Optional[str] = None) -> Any:
        """Alias of route() for `resource/api` URI patterns."""
        return self.route(resource_id)

    def ajax(self, resource_id: Optional[str] = None) -> Any:
        """Alias of route() for `resource/ajax` URI patterns."""
        return self.route(resource_id)

    # ── Output Helpers ────────────────────────────────────────────────────

    def pack(self, data: Any = ABSENT, status_code: Optional[int] = None, message: Optional[str] = None) -> Dict[str, Any]:
        """
        Pack data into the configured envelope.

        The status code slot falls back to the response's current status
        code. Override this method to impose an application-wide format.

        Example:
            packed = self.pack({"bar": "foo"}, 401, "Login Required")
        """
        return pack_envelope(
            self.config.envelope,
            status_code or self.response.get_status_code(),
            message=message,
            body=data,
            omit_empty_body=self.config.omit_empty_body,
        )

    def json(
        self,
        data: Any = ABSENT,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
        body_format: Optional[bool] = None,
    ):
        """
        Send data as JSON and finish the request.

        With body format on (argument, else config.body_format) the data is
        packed into the envelope first. Otherwise scalars are wrapped in a
        list so the body is always a JSON array or object.

        Example:
            return self.json(None, 401, "Login Required", body_format=True)
        """
        if body_format is None:
            body_format = self.config.body_format

        if body_format:
            payload = self.pack(data, status_code, message)
        elif data is ABSENT:
            payload = []
        elif data is None or isinstance(data, _SCALAR_TYPES):
            payload = [data]
        else:
            payload = data

        return self.response.json(payload, status_code)

    # ── Behaviors ─────────────────────────────────────────────────────────

    def _set_behavior(self, action: Union[Action, str], behavior: Behavior) -> bool:
        """
        Register a no-argument hook run before an action's handler.

        Returns:
            False when `action` is not a known action name, True otherwise.

        Raises:
            ConfigurationLockedError: route() has already run.
        """
        try:
            key = Action(action)
        except ValueError:
            return False
        if self._dispatching:
            raise ConfigurationLockedError(action=key.value)
        if not callable(behavior):
            raise TypeError(f"Behavior for '{key.value}' must be callable")
        self._behaviors[key] = behavior
        return True

    # ── Dispatch Internals ────────────────────────────────────────────────

    def _arguments(self, action: Action) -> Tuple[Any, ...]:
        signature = ACTION_SIGNATURES[action]
        args: Tuple[Any, ...] = ()
        if signature.resource_id:
            args += (self._resource_id,)
        if signature.body_params:
            args += (self.request.body_params(),)
        return args

    def _action(self, action: Action, *args: Any) -> Any:
        behavior = self._behaviors.get(action)
        if behavior is not None:
            behavior()
            if self.response.is_sent:
                logger.debug("Behavior for %s sent the response", action.value)
                return self.response.sent_response

        handler_name = self.config.handler_name(action)
        if handler_name is None:
            logger.info("Action %s is disabled in the route table", action.value)
            return self._default_action()

        handler = getattr(self, handler_name, None)
        if handler is None or not callable(handler):
            logger.info("No handler '%s' for action %s", handler_name, action.value)
            return self._default_action()

        logger.debug("Dispatching %s to %s.%s", action.value, type(self).__name__, handler_name)
        return handler(*args)

    def _default_action(self) -> Any:
        """
        Handle a request no routed handler accepts.

        Raises ResourceNotFoundError, which the application renders as a 404
        envelope. Subclasses may override this to write their own response,
        e.g. `return self.json(None, 404, "Not Found", body_format=True)`.
        """
        raise ResourceNotFoundError(
            method=self.request.method(),
            resource_id=self._resource_id,
        )
