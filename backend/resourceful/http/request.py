"""
Resourceful — Request Adapter
===============================

What:  Read-only view of one inbound request: method, content type, raw
       body, parsed body parameters and authentication credentials.
How:   Built once per request by the async factory `from_starlette()`,
       which reads the body (and, for POST forms, the parsed form fields)
       up front. Every accessor after that is synchronous and side-effect
       free; the decoded body and parsed params are cached on first use.
Who:   Owned by exactly one RestController for one request.

Body parameter rules (first match wins):
    1. Content-Type media type is application/json → JSON-decoded body
       (malformed or empty JSON → {})
    2. Method is POST → the transport's pre-parsed form fields
    3. Otherwise → the raw body parsed as a URL-encoded query string

Credential extraction never raises: a missing or malformed Authorization
header yields (None, None) for Basic and None for Bearer.
"""

import base64
import binascii
import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import parse_qsl

from starlette.datastructures import Headers
from starlette.requests import Request

from resourceful.config import settings
from resourceful.schemas.dispatch import HttpMethod

logger = logging.getLogger(__name__)

# Form content types Starlette parses eagerly for POST requests
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

# Header some reverse proxies use to preserve Authorization across a rewrite
REDIRECT_AUTHORIZATION_HEADER = "Redirect-Authorization"


def _media_type(content_type: Optional[str]) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class RequestAdapter:
    """
    Per-request accessor over the transport message.

    Args:
        method:                 Transport-level method (None → GET)
        headers:                Request headers (case-insensitive lookup)
        body:                   Raw body bytes
        form:                   Fields the transport already parsed from a POST body
        auth_user:              Transport-level basic-auth username
        auth_password:          Transport-level basic-auth password
        method_override_header: Header that overrides the method
    """

    def __init__(
        self,
        method: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
        form: Optional[Mapping[str, Any]] = None,
        auth_user: Optional[str] = None,
        auth_password: Optional[str] = None,
        method_override_header: Optional[str] = None,
    ):
        self._transport_method = method
        self._headers = headers if isinstance(headers, Headers) else Headers(headers=dict(headers or {}))
        self._body = body or b""
        self._form: Dict[str, Any] = dict(form or {})
        self._auth_user = auth_user
        self._auth_password = auth_password
        self._method_override_header = method_override_header or settings.method_override_header

        self._raw_body: Optional[str] = None
        self._body_params: Optional[Any] = None

    @classmethod
    async def from_starlette(cls, request: Request) -> "RequestAdapter":
        """
        Build an adapter from a Starlette request.

        The body is read here, once. POST requests with a form content type
        also get their fields parsed, mirroring servers that eagerly decode
        form posts. Transport-level basic-auth fields are taken from
        request.state (auth_user / auth_password) when an upstream
        middleware has set them.
        """
        body = await request.body()
        form: Dict[str, Any] = {}
        content_type = request.headers.get("content-type")
        if request.method.upper() == HttpMethod.POST and _media_type(content_type) in FORM_CONTENT_TYPES:
            form_data = await request.form()
            form = {key: value for key, value in form_data.multi_items()}

        return cls(
            method=request.method,
            headers=request.headers,
            body=body,
            form=form,
            auth_user=getattr(request.state, "auth_user", None),
            auth_password=getattr(request.state, "auth_password", None),
        )

    # ── Method & Content Type ─────────────────────────────────────────────

    def method(self) -> str:
        """
        The request method, upper-cased.

        The override header wins over the transport method; with neither
        present the method is GET.
        """
        override = self.header(self._method_override_header)
        if override:
            return override.strip().upper()
        if self._transport_method:
            return self._transport_method.upper()
        return HttpMethod.GET.value

    def content_type(self) -> Optional[str]:
        return self.header("Content-Type")

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """A request header by case-insensitive name; repeated headers give the first value."""
        return self._headers.get(name, default)

    # ── Body ──────────────────────────────────────────────────────────────

    def raw_body(self) -> str:
        """The unparsed body text (decoded once, then cached)."""
        if self._raw_body is None:
            self._raw_body = self._body.decode("utf-8", errors="replace")
        return self._raw_body

    def body_params(self) -> Any:
        """
        Parameters carried in the request body.

        Returns a dict for form and query-string bodies. A JSON body returns
        whatever structure it decodes to; malformed JSON returns {}.
        """
        if self._body_params is None:
            if _media_type(self.content_type()) == "application/json":
                self._body_params = self._parse_json(self.raw_body())
            elif self.method() == HttpMethod.POST:
                self._body_params = dict(self._form)
            else:
                self._body_params = dict(parse_qsl(self.raw_body(), keep_blank_values=True))
        return self._body_params

    def input(self) -> Any:
        """Alias of body_params()."""
        return self.body_params()

    @staticmethod
    def _parse_json(raw: str) -> Any:
        if not raw.strip():
            return {}
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring malformed JSON request body (%d chars)", len(raw))
            return {}
        return {} if parsed is None else parsed

    # ── Credentials ───────────────────────────────────────────────────────

    def basic_auth_credentials(self) -> Tuple[Optional[str], Optional[str]]:
        """
        Credentials sent with HTTP Basic authentication.

        Returns:
            (username, password); either element is None when not given.

        Example:
            username, password = request.basic_auth_credentials()
        """
        if self._auth_user is not None and self._auth_password is not None:
            return self._auth_user, self._auth_password

        token = self._headers.get("authorization") or self._headers.get(REDIRECT_AUTHORIZATION_HEADER)
        if not token or not token.lower().startswith("basic "):
            return None, None

        try:
            decoded = base64.b64decode(token[6:].strip(), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            logger.debug("Ignoring undecodable Basic authorization header")
            return None, None

        parts = [part or None for part in decoded.split(":", 1)]
        if len(parts) < 2:
            return parts[0], None
        return parts[0], parts[1]

    def bearer_auth_credentials(self) -> Optional[str]:
        """The token of an OAuth 2.0 Bearer Authorization header, if any."""
        token = self._headers.get("authorization")
        if not token or not token.lower().startswith("bearer "):
            return None
        return token[7:].strip() or None
