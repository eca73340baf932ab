"""
Resourceful — Envelope Packing
================================

What:  Builds the {code, message, data}-style wrapper around response bodies.
How:   The three slots are named by an EnvelopeFieldNames instance:
       - status code slot: always present
       - status text slot: only for a non-empty message
       - body slot: only when a body was supplied at all

"No body" is the ABSENT sentinel, never None: None, 0, False, "" and []
are all bodies. With omit_empty_body the empty string/bytes/collection
cases are dropped as well.
"""

from typing import Any, Dict, Optional

from resourceful.schemas.dispatch import EnvelopeFieldNames


class _Absent:
    """Marker for "no body supplied"."""

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


def is_empty_body(body: Any) -> bool:
    return isinstance(body, (str, bytes, list, tuple, dict, set, frozenset)) and len(body) == 0


def pack_envelope(
    fields: EnvelopeFieldNames,
    status_code: int,
    message: Optional[str] = None,
    body: Any = ABSENT,
    omit_empty_body: bool = False,
) -> Dict[str, Any]:
    """
    Pack a status code, message and body under the configured field names.

    Example:
        >>> pack_envelope(EnvelopeFieldNames(), 401, "Login Required", {"foo": "bar"})
        {'code': 401, 'message': 'Login Required', 'data': {'foo': 'bar'}}
    """
    packed: Dict[str, Any] = {fields.status_code: status_code}
    if message:
        packed[fields.status_text] = message
    if body is not ABSENT and not (omit_empty_body and is_empty_body(body)):
        packed[fields.body] = body
    return packed
