"""
Resourceful — Request Adapter Unit Tests
==========================================

What:  Tests for method resolution, body parsing and credential extraction.

What we test:
    ✅ Method override header precedence and GET default
    ✅ JSON / POST form / query-string body selection and caching
    ✅ Malformed JSON recovers to {}
    ✅ Basic and Bearer credentials, including malformed headers
    ✅ from_starlette() reads body and form fields
"""

import base64

import pytest
from starlette.requests import Request

from resourceful.http.request import RequestAdapter


def basic(value: str) -> str:
    return "Basic " + base64.b64encode(value.encode()).decode()


class TestMethod:
    """Tests for method()."""

    def test_transport_method_upper_cased(self, make_request):
        assert make_request("patch").method() == "PATCH"

    def test_override_header_wins(self, make_request):
        request = make_request("POST", headers={"X-HTTP-Method-Override": "delete"})
        assert request.method() == "DELETE"

    def test_defaults_to_get(self, make_request):
        assert make_request(None).method() == "GET"

    def test_custom_override_header(self, make_request):
        request = make_request(
            "POST",
            headers={"X-Method": "put"},
            method_override_header="X-Method",
        )
        assert request.method() == "PUT"


class TestHeaders:
    """Tests for header() and content_type()."""

    def test_lookup_is_case_insensitive(self, make_request):
        request = make_request(headers={"X-Tenant": "acme"})
        assert request.header("x-tenant") == "acme"
        assert request.header("X-TENANT") == "acme"

    def test_missing_header_default(self, make_request):
        request = make_request()
        assert request.header("X-Tenant") is None
        assert request.header("X-Tenant", "none") == "none"

    def test_content_type(self, make_request):
        request = make_request("POST", content_type="application/json; charset=utf-8")
        assert request.content_type() == "application/json; charset=utf-8"
        assert make_request().content_type() is None


class TestBody:
    """Tests for raw_body() and body_params()."""

    def test_json_body(self, make_request):
        request = make_request("PUT", body=b'{"a":1}', content_type="application/json")
        assert request.body_params() == {"a": 1}

    def test_json_content_type_is_case_insensitive(self, make_request):
        request = make_request("PUT", body=b'{"a":1}', content_type="Application/JSON")
        assert request.body_params() == {"a": 1}

    def test_json_content_type_with_charset(self, make_request):
        request = make_request(
            "PATCH", body=b'{"a":1}', content_type="application/json; charset=utf-8"
        )
        assert request.body_params() == {"a": 1}

    def test_malformed_json_yields_empty(self, make_request):
        request = make_request("POST", body=b"{bad", content_type="application/json")
        assert request.body_params() == {}

    def test_empty_json_body_yields_empty(self, make_request):
        request = make_request("PUT", body=b"", content_type="application/json")
        assert request.body_params() == {}

    def test_json_wins_over_post_form(self, make_request):
        request = make_request(
            "POST",
            body=b'{"from": "json"}',
            content_type="application/json",
            form={"from": "form"},
        )
        assert request.body_params() == {"from": "json"}

    def test_post_uses_form_fields_not_raw_body(self, make_request):
        request = make_request(
            "POST",
            body=b"name=raw",
            content_type="application/x-www-form-urlencoded",
            form={"name": "parsed"},
        )
        assert request.body_params() == {"name": "parsed"}

    def test_other_methods_parse_query_string(self, make_request):
        request = make_request(
            "PUT",
            body=b"name=x&tag=a%20b&empty=",
            content_type="application/x-www-form-urlencoded",
        )
        assert request.body_params() == {"name": "x", "tag": "a b", "empty": ""}

    def test_body_params_cached(self, make_request):
        request = make_request("PUT", body=b'{"a":1}', content_type="application/json")
        first = request.body_params()
        assert request.body_params() is first
        assert request.input() is first

    def test_raw_body_cached(self, make_request):
        request = make_request("PUT", body="héllo".encode())
        assert request.raw_body() == "héllo"
        assert request.raw_body() is request.raw_body()

    def test_content_type(self, make_request):
        assert make_request(content_type="text/plain").content_type() == "text/plain"
        assert make_request().content_type() is None


class TestBasicAuth:
    """Tests for basic_auth_credentials()."""

    def test_transport_fields_win(self, make_request):
        request = make_request(
            headers={"Authorization": basic("header:pw")},
            auth_user="transport",
            auth_password="secret",
        )
        assert request.basic_auth_credentials() == ("transport", "secret")

    def test_user_and_password(self, make_request):
        request = make_request(headers={"Authorization": basic("alice:s3:cret")})
        assert request.basic_auth_credentials() == ("alice", "s3:cret")

    def test_missing_password(self, make_request):
        request = make_request(headers={"Authorization": basic("user:")})
        assert request.basic_auth_credentials() == ("user", None)

    def test_no_colon(self, make_request):
        request = make_request(headers={"Authorization": basic("user")})
        assert request.basic_auth_credentials() == ("user", None)

    def test_prefix_is_case_insensitive(self, make_request):
        token = base64.b64encode(b"bob:pw").decode()
        request = make_request(headers={"Authorization": "bAsIc " + token})
        assert request.basic_auth_credentials() == ("bob", "pw")

    def test_redirect_preserved_header(self, make_request):
        request = make_request(headers={"Redirect-Authorization": basic("carol:pw")})
        assert request.basic_auth_credentials() == ("carol", "pw")

    def test_no_header(self, make_request):
        assert make_request().basic_auth_credentials() == (None, None)

    def test_only_one_transport_field_falls_back_to_header(self, make_request):
        request = make_request(auth_user="transport")
        assert request.basic_auth_credentials() == (None, None)

    def test_bearer_header_is_not_basic(self, make_request):
        request = make_request(headers={"Authorization": "Bearer abc123"})
        assert request.basic_auth_credentials() == (None, None)

    def test_undecodable_payload(self, make_request):
        request = make_request(headers={"Authorization": "Basic %%%not-base64"})
        assert request.basic_auth_credentials() == (None, None)


class TestBearerAuth:
    """Tests for bearer_auth_credentials()."""

    @pytest.mark.parametrize("prefix", ["Bearer", "bearer", "BEARER", "BeArEr"])
    def test_token(self, make_request, prefix):
        request = make_request(headers={"Authorization": f"{prefix} abc123"})
        assert request.bearer_auth_credentials() == "abc123"

    def test_basic_header_yields_none(self, make_request):
        request = make_request(headers={"Authorization": basic("user:pw")})
        assert request.bearer_auth_credentials() is None

    def test_no_header(self, make_request):
        assert make_request().bearer_auth_credentials() is None


def _starlette_request(method: str, body: bytes, headers: dict) -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": "/",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }
    sent = False

    async def receive():
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


class TestFromStarlette:
    """Tests for the async factory."""

    @pytest.mark.asyncio
    async def test_reads_json_body(self):
        request = _starlette_request("PUT", b'{"name":"x"}', {"Content-Type": "application/json"})
        adapter = await RequestAdapter.from_starlette(request)
        assert adapter.method() == "PUT"
        assert adapter.body_params() == {"name": "x"}

    @pytest.mark.asyncio
    async def test_reads_post_form(self):
        request = _starlette_request(
            "POST", b"title=hello&tag=a", {"Content-Type": "application/x-www-form-urlencoded"}
        )
        adapter = await RequestAdapter.from_starlette(request)
        assert adapter.body_params() == {"title": "hello", "tag": "a"}
        assert adapter.raw_body() == "title=hello&tag=a"
