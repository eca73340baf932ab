"""
Resourceful — Dispatcher Configuration Schemas
================================================

What:  Pydantic models describing how a RestController dispatches and packs.
How:   Frozen models; a DispatcherConfig is built once (usually from the
       package settings) and shared read-only by every controller instance.
Who:   Consumed by resourceful.rest.controller and resourceful.routes.resource.

Route table:
    Maps each logical Action to the name of the handler method that
    implements it. The key set is always the full Action enum: partial
    input is merged over the defaults, unknown keys fail validation.
    A value of None disables the action (requests for it take the
    default action). Once validated the table is a read-only mapping, so a
    config shared between requests cannot be re-routed in place.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class HttpMethod(str, Enum):
    """Upper-case HTTP method names the dispatcher routes on."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class Action(str, Enum):
    """Logical CRUD actions a request can be dispatched to."""

    INDEX = "index"
    STORE = "store"
    SHOW = "show"
    UPDATE = "update"
    DELETE = "delete"
    DELETE_ALL = "deleteAll"


class TransitionTable(str, Enum):
    """
    Versioned method/id → action tables.

    STRICT:            DELETE without a resource id is a routing miss.
    COLLECTION_DELETE: DELETE without a resource id dispatches DELETE_ALL.

    All other transitions are identical between the two.
    """

    STRICT = "strict"
    COLLECTION_DELETE = "collection-delete"


DEFAULT_ROUTES: Mapping[Action, Optional[str]] = MappingProxyType({
    Action.INDEX: "index",
    Action.STORE: "store",
    Action.SHOW: "show",
    Action.UPDATE: "update",
    Action.DELETE: "delete",
    Action.DELETE_ALL: "delete_all",
})


class EnvelopeFieldNames(BaseModel):
    """Output key names for the three envelope slots."""

    model_config = ConfigDict(frozen=True)

    status_code: str = Field(default="code", min_length=1)
    status_text: str = Field(default="message", min_length=1)
    body: str = Field(default="data", min_length=1)


class DispatcherConfig(BaseModel):
    """
    Immutable dispatch configuration for a controller class.

    Attributes:
        routes:           Action → handler method name (None disables)
        envelope:         Field names used by pack()
        transition_table: Which versioned table route() follows
        body_format:      Default for packing controller json() output
        omit_empty_body:  Drop empty collections/strings from the body slot
    """

    model_config = ConfigDict(frozen=True)

    routes: Dict[Action, Optional[str]] = Field(default_factory=lambda: MappingProxyType(dict(DEFAULT_ROUTES)))
    envelope: EnvelopeFieldNames = Field(default_factory=EnvelopeFieldNames)
    transition_table: TransitionTable = TransitionTable.STRICT
    body_format: bool = False
    omit_empty_body: bool = False

    @field_validator("routes", mode="before")
    @classmethod
    def merge_default_routes(cls, v: Any) -> Any:
        if v is None:
            return dict(DEFAULT_ROUTES)
        if not isinstance(v, Mapping):
            return v
        # Unknown action names are rejected by the Action key validation
        merged: Dict[str, Optional[str]] = {a.value: h for a, h in DEFAULT_ROUTES.items()}
        for key, handler in v.items():
            merged[key.value if isinstance(key, Action) else key] = handler
        return merged

    @field_validator("routes")
    @classmethod
    def validate_handler_names(cls, v: Dict[Action, Optional[str]]) -> Mapping[Action, Optional[str]]:
        for action, handler in v.items():
            if handler is not None and not handler.isidentifier():
                raise ValueError(
                    f"Handler name for '{action.value}' must be a valid identifier, got '{handler}'"
                )
        return MappingProxyType(dict(v))

    @field_serializer("routes")
    def serialize_routes(self, routes: Mapping[Action, Optional[str]]) -> Dict[str, Optional[str]]:
        return {action.value: handler for action, handler in routes.items()}

    def handler_name(self, action: Action) -> Optional[str]:
        return self.routes.get(action)

    def with_routes(self, **overrides: Optional[str]) -> "DispatcherConfig":
        """
        Return a copy with some handler names remapped.

        Keyword names are logical action names, e.g.
        ``config.with_routes(index="list_all", deleteAll=None)``.
        """
        routes: Dict[str, Optional[str]] = {a.value: name for a, name in self.routes.items()}
        routes.update(overrides)
        return type(self).model_validate({**self.model_dump(exclude={"routes"}), "routes": routes})

    @classmethod
    def from_settings(cls, settings: Any) -> "DispatcherConfig":
        """Build the default configuration from a resourceful.config.Settings."""
        return cls(
            envelope=EnvelopeFieldNames(
                status_code=settings.envelope_code_field,
                status_text=settings.envelope_message_field,
                body=settings.envelope_body_field,
            ),
            transition_table=TransitionTable(settings.transition_table),
            body_format=settings.body_format,
            omit_empty_body=settings.omit_empty_body,
        )
