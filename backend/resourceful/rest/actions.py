"""
Resourceful — Action Selection
================================

Pure method/resource-id → action state machine.

Transition table (STRICT, the default):

    Method          Resource id   Action
    ─────────────   ───────────   ──────────────────────────────
    POST            absent        store(body_params)
    POST            present       — (default action)
    PUT             any           update(id, body_params), id may be None
    PATCH           present       update(id, body_params)
    PATCH           absent        — (default action)
    DELETE          present       delete(id, body_params)
    DELETE          absent        — (default action)
    GET / other     present       show(id)
    GET / other     absent        index()

COLLECTION_DELETE differs in a single row:

    DELETE          absent        deleteAll(body_params)

None means "no action": the dispatcher runs its default action.
"""

from typing import Dict, NamedTuple, Optional

from resourceful.schemas.dispatch import Action, HttpMethod, TransitionTable


class Signature(NamedTuple):
    """Which positional arguments a handler receives, in order."""

    resource_id: bool
    body_params: bool


ACTION_SIGNATURES: Dict[Action, Signature] = {
    Action.INDEX: Signature(resource_id=False, body_params=False),
    Action.STORE: Signature(resource_id=False, body_params=True),
    Action.SHOW: Signature(resource_id=True, body_params=False),
    Action.UPDATE: Signature(resource_id=True, body_params=True),
    Action.DELETE: Signature(resource_id=True, body_params=True),
    Action.DELETE_ALL: Signature(resource_id=False, body_params=True),
}


def has_resource_id(resource_id: Optional[str]) -> bool:
    return resource_id is not None and resource_id != ""


def select_action(
    method: str,
    resource_id: Optional[str],
    table: TransitionTable = TransitionTable.STRICT,
) -> Optional[Action]:
    """Select the action for a method and optional resource id."""
    with_id = has_resource_id(resource_id)

    if method == HttpMethod.POST:
        return None if with_id else Action.STORE

    if method == HttpMethod.PATCH:
        return Action.UPDATE if with_id else None

    if method == HttpMethod.PUT:
        return Action.UPDATE

    if method == HttpMethod.DELETE:
        if with_id:
            return Action.DELETE
        if table == TransitionTable.COLLECTION_DELETE:
            return Action.DELETE_ALL
        return None

    return Action.SHOW if with_id else Action.INDEX
