"""
Resourceful — Response Formatters
===================================

What:  Output formats, their content types, and the functions that turn
       application data into a wire-ready string.
How:   A plain registry dict maps a lower-case format name to a formatter.
       Formats without a formatter (raw, html) pass strings through
       unchanged; the response adapter falls back to JSON for collections.

Content types:
    raw   → text/plain
    html  → text/html
    json  → application/json           (RFC 8259)
    jsonp → application/javascript     (RFC 4329)
    xml   → application/xml            (RFC 7303)
"""

import json
from enum import Enum
from typing import Any, Callable, Dict
from xml.etree import ElementTree

from fastapi.encoders import jsonable_encoder


class ResponseFormat(str, Enum):
    RAW = "raw"
    HTML = "html"
    JSON = "json"
    JSONP = "jsonp"
    XML = "xml"


CONTENT_TYPES: Dict[str, str] = {
    ResponseFormat.RAW.value: "text/plain; charset=utf-8",
    ResponseFormat.HTML.value: "text/html; charset=utf-8",
    ResponseFormat.JSON.value: "application/json",
    ResponseFormat.JSONP.value: "application/javascript; charset=utf-8",
    ResponseFormat.XML.value: "application/xml; charset=utf-8",
}

Formatter = Callable[[Any], Any]


def format_json(data: Any) -> str:
    """
    Serialize data as compact JSON.

    jsonable_encoder handles pydantic models, datetimes, UUIDs, enums and
    other values handlers commonly return.
    """
    return json.dumps(jsonable_encoder(data), ensure_ascii=False, separators=(",", ":"))


def format_jsonp(data: Any) -> str:
    """
    Wrap JSON data in a JavaScript callback.

    data must be a mapping with "callback" (the function name) and "data"
    (the payload). Anything else is emitted as plain JSON.
    """
    if isinstance(data, dict) and "callback" in data and "data" in data:
        return f"{data['callback']}({format_json(data['data'])});"
    return format_json(data)


def _append_xml(parent: ElementTree.Element, value: Any) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            tag = str(key)
            if not tag.isidentifier():
                tag = "item"
            child = ElementTree.SubElement(parent, tag)
            _append_xml(child, item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            child = ElementTree.SubElement(parent, "item")
            _append_xml(child, item)
    elif value is None:
        return
    elif isinstance(value, bool):
        parent.text = "true" if value else "false"
    else:
        parent.text = str(value)


def format_xml(data: Any) -> str:
    """
    Render data as XML under a <response> root.

    Mapping keys become element names (keys that are not valid names become
    <item>), sequence entries become <item> elements, None becomes an empty
    element.
    """
    root = ElementTree.Element("response")
    _append_xml(root, jsonable_encoder(data))
    body = ElementTree.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body


# raw and html have no formatter
DEFAULT_FORMATTERS: Dict[str, Formatter] = {
    ResponseFormat.JSON.value: format_json,
    ResponseFormat.JSONP.value: format_jsonp,
    ResponseFormat.XML.value: format_xml,
}
