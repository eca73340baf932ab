from resourceful.schemas.dispatch import (
    Action,
    DispatcherConfig,
    EnvelopeFieldNames,
    TransitionTable,
)

__all__ = ["Action", "DispatcherConfig", "EnvelopeFieldNames", "TransitionTable"]
