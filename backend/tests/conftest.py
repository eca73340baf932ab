"""
Resourceful — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── make_request:     Factory for RequestAdapter instances
    ├── response:         Fresh ResponseAdapter
    ├── make_controller:  Factory for RecordingController instances
    └── test_client:      HTTPX AsyncClient over the ASGI app
"""

import os
from typing import Any, Dict, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Override settings for testing BEFORE any package imports
os.environ["RESOURCEFUL_LOG_LEVEL"] = "WARNING"

from resourceful.http.request import RequestAdapter  # noqa: E402
from resourceful.http.response import ResponseAdapter  # noqa: E402
from resourceful.rest.controller import RestController  # noqa: E402
from resourceful.schemas.dispatch import DispatcherConfig, TransitionTable  # noqa: E402


class RecordingController(RestController):
    """
    Controller implementing every handler; each call is recorded and
    answered with {"action": ..., "args": [...]}.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.calls = []

    def _record(self, action: str, *args: Any):
        self.calls.append((action, args))
        return self.json({"action": action, "args": list(args)})

    def index(self):
        return self._record("index")

    def store(self, request_data):
        return self._record("store", request_data)

    def show(self, resource_id):
        return self._record("show", resource_id)

    def update(self, resource_id, request_data):
        return self._record("update", resource_id, request_data)

    def delete(self, resource_id, request_data):
        return self._record("delete", resource_id, request_data)

    def delete_all(self, request_data):
        return self._record("deleteAll", request_data)


class CollectionDeleteController(RecordingController):
    config = DispatcherConfig(transition_table=TransitionTable.COLLECTION_DELETE)


@pytest.fixture
def make_request():
    """
    Factory for RequestAdapter instances.

    Usage:
        request = make_request("PUT", body=b'{"a": 1}', content_type="application/json")
    """

    def _make(
        method: Optional[str] = "GET",
        body: bytes = b"",
        content_type: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        form: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> RequestAdapter:
        all_headers = dict(headers or {})
        if content_type:
            all_headers["Content-Type"] = content_type
        return RequestAdapter(method=method, headers=all_headers, body=body, form=form, **kwargs)

    return _make


@pytest.fixture
def response():
    return ResponseAdapter()


@pytest.fixture
def make_controller(make_request):
    """
    Factory for RecordingController instances over a fresh adapter pair.

    Usage:
        controller = make_controller("DELETE")
        controller.route("42")
        assert controller.calls == [("delete", ("42", {}))]
    """

    def _make(method: Optional[str] = "GET", controller_cls=RecordingController, config=None,
              behaviors=None, **request_kwargs: Any) -> RecordingController:
        request = make_request(method, **request_kwargs)
        return controller_cls(request, ResponseAdapter(), config=config, behaviors=behaviors)

    return _make


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient talking to an app with two mounted resources:

        /articles  → RecordingController (strict table, api alias)
        /bins      → CollectionDeleteController
    """
    from resourceful.main import create_app
    from resourceful.routes.resource import resource_router

    app = create_app(
        resource_router("/articles", RecordingController, aliases=("api",)),
        resource_router("/bins", CollectionDeleteController),
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
