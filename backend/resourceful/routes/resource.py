"""
Resourceful — Resource Router
===============================

What:  Mounts a RestController subclass on a FastAPI APIRouter.
How:   Registers `path` and `path/{resource_id}` for GET, POST, PUT, PATCH
       and DELETE. Each request gets a fresh RequestAdapter, ResponseAdapter
       and controller instance; the controller's route() runs in the
       threadpool (sync handlers) and awaitable results are awaited.
       The controller name, the dispatched action and the envelope field
       names are left on request.state for the access log and the error
       handlers.
Who:   Used by applications to expose resources; create_app() includes the
       returned routers.

Usage:
    app = create_app(resource_router("/articles", ArticleController))

Route layout:
    /articles                → route(None)
    /articles/{resource_id}  → route(resource_id)
    /articles/api[/{id}]     → api(...)    (only with aliases=("api",))
    /articles/ajax[/{id}]    → ajax(...)   (only with aliases=("ajax",))
"""

import inspect
import logging
from typing import Any, Optional, Sequence, Type

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from resourceful.http.request import RequestAdapter
from resourceful.http.response import ResponseAdapter
from resourceful.rest.controller import RestController
from resourceful.schemas.dispatch import DispatcherConfig, HttpMethod

logger = logging.getLogger(__name__)

ROUTED_METHODS = [method.value for method in HttpMethod]


def finalize_response(controller: RestController, result: Any) -> Response:
    """
    Turn whatever a dispatch returned into the response to emit.

    A response the controller already sent wins. Otherwise a returned
    Starlette Response is used as-is, other non-None data is sent in the
    controller's current format, and None sends the buffered output.
    """
    if controller.response.is_sent:
        return controller.response.sent_response
    if isinstance(result, Response):
        return result
    if result is not None:
        controller.response.set_data(result)
    return controller.response.send()


def _make_endpoint(
    controller_cls: Type[RestController],
    config: Optional[DispatcherConfig],
    entry_point: str,
):
    async def endpoint(request: Request) -> Response:
        request_adapter = await RequestAdapter.from_starlette(request)
        controller = controller_cls(request_adapter, ResponseAdapter(), config=config)
        request.state.resource = controller_cls.__name__
        request.state.envelope = controller.config.envelope

        dispatch = getattr(controller, entry_point)
        try:
            result = await run_in_threadpool(dispatch, request.path_params.get("resource_id"))
            if inspect.isawaitable(result):
                result = await result
        finally:
            action = controller.dispatched_action
            request.state.action = action.value if action is not None else None
        return finalize_response(controller, result)

    endpoint.__name__ = f"{controller_cls.__name__}_{entry_point}"
    return endpoint


def resource_router(
    path: str,
    controller_cls: Type[RestController],
    config: Optional[DispatcherConfig] = None,
    aliases: Sequence[str] = (),
    tags: Optional[Sequence[str]] = None,
) -> APIRouter:
    """
    Build an APIRouter exposing one resource controller.

    Args:
        path:            Collection path, e.g. "/articles"
        controller_cls:  RestController subclass handling the resource
        config:          Overrides the controller class's DispatcherConfig
        aliases:         Extra "api"/"ajax" path segments routed to the
                         matching controller aliases
        tags:            OpenAPI tags (defaults to the controller name)
    """
    path = path.rstrip("/")
    router = APIRouter(tags=list(tags) if tags else [controller_cls.__name__])

    # Alias paths first so "/articles/api" is not taken as a resource id
    for alias in aliases:
        if alias not in ("api", "ajax"):
            raise ValueError(f"Unknown route alias '{alias}'. Expected 'api' or 'ajax'")
        alias_endpoint = _make_endpoint(controller_cls, config, alias)
        for alias_path in (f"{path}/{alias}", f"{path}/{alias}/{{resource_id}}"):
            router.add_api_route(
                alias_path,
                alias_endpoint,
                methods=ROUTED_METHODS,
                response_model=None,
                include_in_schema=False,
            )

    endpoint = _make_endpoint(controller_cls, config, "route")
    for route_path in (path or "/", f"{path}/{{resource_id}}"):
        router.add_api_route(
            route_path,
            endpoint,
            methods=ROUTED_METHODS,
            response_model=None,
        )

    logger.debug("Mounted %s at %s", controller_cls.__name__, path or "/")
    return router
