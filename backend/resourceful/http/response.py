"""
Resourceful — Response Adapter
================================

What:  Holds the output format and status code of one response, converts
       application data into the body, and emits the final Starlette
       Response.
How:   All writes go to an OutputBuffer handed to the adapter at
       construction. Nothing reaches the transport until send(), which
       renders the buffer into a starlette.responses.Response exactly once.
Who:   Owned by exactly one RestController for one request. Handlers reach
       it through the controller's json()/pack() helpers or directly via
       `self.response`.

Example:
    response = ResponseAdapter()
    response.set_format("json")
    response.set_data({"foo": "bar"})
    response.set_status_code(201, "Created")
    return response.send()

Termination:
    send() is terminal for the request. Handlers end with
    `return self.response.send()` (or `return self.json(...)`); reaching
    send() a second time raises ResponseAlreadySentError.
"""

import logging
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Tuple

from starlette.responses import Response

from resourceful.config import settings
from resourceful.exceptions import InvalidStatusCode, ResponseAlreadySentError
from resourceful.http.formatters import (
    CONTENT_TYPES,
    DEFAULT_FORMATTERS,
    Formatter,
    ResponseFormat,
    format_json,
)

logger = logging.getLogger(__name__)


class OutputBuffer:
    """
    Buffered response state for one request.

    Headers are kept as an ordered list of (name, value) pairs so the same
    header name can carry several values.
    """

    def __init__(self) -> None:
        self.status_code: int = 200
        self.status_text: Optional[str] = None
        self.headers: List[Tuple[str, str]] = []
        self.body: bytes = b""

    def set_header(self, name: str, value: str) -> None:
        """Replace every value of `name` with a single value."""
        lowered = name.lower()
        self.headers = [(k, v) for k, v in self.headers if k.lower() != lowered]
        self.headers.append((name, value))

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def get_header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in reversed(self.headers):
            if key.lower() == lowered:
                return value
        return None

    def get_headers(self, name: str) -> List[str]:
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]


class ResponseAdapter:
    """
    Per-request response builder.

    State:
        format:       Output format name (default from settings, normally json)
        status code:  Integer status (default 200)
        output:       The OutputBuffer all writes land in
    """

    def __init__(self, output: Optional[OutputBuffer] = None, response_format: Optional[str] = None):
        self.output = output if output is not None else OutputBuffer()
        self._format: str = (response_format or settings.default_format).lower()
        self._status_code: int = 200
        self._formatters: Dict[str, Formatter] = dict(DEFAULT_FORMATTERS)
        self._sent: Optional[Response] = None

    # ── Format ────────────────────────────────────────────────────────────

    def set_format(self, response_format: str) -> "ResponseAdapter":
        """
        Store the output format.

        Formats with a known content type set the Content-Type header right
        away; unknown formats leave the header untouched.
        """
        self._format = response_format.lower()
        content_type = CONTENT_TYPES.get(self._format)
        if content_type:
            self.output.set_header("Content-Type", content_type)
        return self

    def get_format(self) -> str:
        return self._format

    def register_formatter(self, name: str, formatter: Formatter) -> "ResponseAdapter":
        """Add or replace the formatter used for `name` on this response."""
        self._formatters[name.lower()] = formatter
        return self

    def format(self, data: Any, response_format: str) -> Any:
        """
        Convert data using the formatter registered for the format.

        Without a formatter, collections fall back to JSON and anything
        else is returned unchanged.
        """
        formatter = self._formatters.get(response_format.lower())
        if formatter is not None:
            return formatter(data)
        if isinstance(data, (dict, list, tuple)):
            return format_json(data)
        return data

    # ── Status ────────────────────────────────────────────────────────────

    def set_status_code(self, code: Optional[int] = None, text: Optional[str] = None) -> "ResponseAdapter":
        """
        Set the response status code.

        Args:
            code:  Status code; None means 200
            text:  Custom status text; without it the standard reason
                   phrase is used when the code has one

        Raises:
            InvalidStatusCode: code is outside 100-599. Nothing is changed.
        """
        if code is None:
            code = 200
        try:
            status = int(code)
        except (TypeError, ValueError):
            raise InvalidStatusCode(code) from None
        if status < 100 or status >= 600:
            raise InvalidStatusCode(status)

        self._status_code = status
        self.output.status_code = status
        if text:
            self.output.status_text = text
        else:
            try:
                self.output.status_text = HTTPStatus(status).phrase
            except ValueError:
                self.output.status_text = None
        return self

    def get_status_code(self) -> int:
        return self._status_code

    def get_status_text(self) -> Optional[str]:
        return self.output.status_text

    def is_invalid(self) -> bool:
        """
        Whether the stored status code is outside 100-599.

        set_status_code() rejects such codes before storing them, so this is
        always False; it is kept as the status-range check callers can assert.
        """
        return self._status_code < 100 or self._status_code >= 600

    # ── Body & Headers ────────────────────────────────────────────────────

    def set_data(self, data: Any) -> "ResponseAdapter":
        """Format data with the current format and buffer it as the body."""
        formatted = self.format(data, self._format)
        if isinstance(formatted, bytes):
            self.output.body = formatted
        elif formatted is None:
            self.output.body = b""
        else:
            self.output.body = str(formatted).encode("utf-8")
        return self

    def get_output(self) -> bytes:
        return self.output.body

    def add_header(self, name: str, value: str) -> "ResponseAdapter":
        """Append a header value; existing values for the name are kept."""
        self.output.add_header(name, value)
        return self

    def with_added_header(self, name: str, value: str) -> "ResponseAdapter":
        """Alias of add_header()."""
        return self.add_header(name, value)

    # ── Sending ───────────────────────────────────────────────────────────

    @property
    def is_sent(self) -> bool:
        return self._sent is not None

    @property
    def sent_response(self) -> Optional[Response]:
        return self._sent

    def send(self) -> Response:
        """
        Render the buffer into a Starlette Response and finish the request.

        Raises:
            ResponseAlreadySentError: send() already ran for this response.
        """
        if self._sent is not None:
            raise ResponseAlreadySentError(context={"status_code": self._status_code})

        response = Response(content=self.output.body, status_code=self.output.status_code)
        for name, value in self.output.headers:
            response.headers.append(name, value)

        logger.debug(
            "Sending %d %s (%s, %d bytes)",
            self.output.status_code,
            self.output.status_text or "",
            self._format,
            len(self.output.body),
        )
        self._sent = response
        return response

    def json(self, data: Any = None, status_code: Optional[int] = None) -> Response:
        """
        Send data as JSON.

        Sets the status code when given, forces the JSON format, buffers
        data unless it is None, then sends.
        """
        if status_code:
            self.set_status_code(status_code)

        self.set_format(ResponseFormat.JSON.value)

        if data is not None:
            self.set_data(data)

        return self.send()
