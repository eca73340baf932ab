from resourceful.rest.actions import select_action
from resourceful.rest.controller import RestController
from resourceful.rest.envelope import ABSENT, pack_envelope

__all__ = ["ABSENT", "RestController", "pack_envelope", "select_action"]
