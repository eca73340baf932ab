"""
Resourceful — Envelope Packing Tests
======================================

What:  Tests for pack_envelope() and RestController.pack()/json().

Packing variant under test:
    Default: empty collections/strings ARE bodies and are packed.
    omit_empty_body=True: they are dropped like an absent body.
"""

import json

import pytest

from resourceful.rest.envelope import ABSENT, pack_envelope
from resourceful.schemas.dispatch import DispatcherConfig, EnvelopeFieldNames


class TestPackEnvelope:
    """Tests for the pure packing function."""

    def test_all_slots(self):
        packed = pack_envelope(EnvelopeFieldNames(), 401, "Login Required", {"bar": "foo"})
        assert packed == {"code": 401, "message": "Login Required", "data": {"bar": "foo"}}

    def test_absent_body_and_message(self):
        assert pack_envelope(EnvelopeFieldNames(), 200) == {"code": 200}

    def test_empty_message_is_omitted(self):
        assert pack_envelope(EnvelopeFieldNames(), 200, "", ABSENT) == {"code": 200}

    @pytest.mark.parametrize("body", [[], "", {}, 0, False, None])
    def test_empty_but_present_bodies_are_included(self, body):
        packed = pack_envelope(EnvelopeFieldNames(), 200, body=body)
        assert "data" in packed
        assert packed["data"] == body

    def test_omit_empty_body_variant(self):
        packed = pack_envelope(EnvelopeFieldNames(), 404, "Not Found", [], omit_empty_body=True)
        assert packed == {"code": 404, "message": "Not Found"}

    def test_omit_empty_body_keeps_falsy_scalars(self):
        packed = pack_envelope(EnvelopeFieldNames(), 200, body=0, omit_empty_body=True)
        assert packed == {"code": 200, "data": 0}

    def test_custom_field_names(self):
        fields = EnvelopeFieldNames(status_code="status", status_text="msg", body="result")
        packed = pack_envelope(fields, 201, "Created", [1])
        assert packed == {"status": 201, "msg": "Created", "result": [1]}

    def test_absent_is_falsy_singleton(self):
        assert not ABSENT
        assert repr(ABSENT) == "ABSENT"


class TestControllerPack:
    """Tests for RestController.pack() and json() with body format."""

    def test_pack_default_variant_keeps_empty_list(self, make_controller):
        controller = make_controller()
        assert controller.pack([], 404, "Not Found") == {
            "code": 404,
            "message": "Not Found",
            "data": [],
        }

    def test_pack_omit_empty_variant(self, make_controller):
        controller = make_controller(config=DispatcherConfig(omit_empty_body=True))
        assert controller.pack([], 404, "Not Found") == {"code": 404, "message": "Not Found"}

    def test_pack_uses_current_status_code(self, make_controller):
        controller = make_controller()
        controller.response.set_status_code(202)
        assert controller.pack({"a": 1}) == {"code": 202, "data": {"a": 1}}

    def test_pack_without_body(self, make_controller):
        controller = make_controller()
        assert controller.pack(status_code=204) == {"code": 204}

    def test_json_with_body_format(self, make_controller):
        controller = make_controller()
        sent = controller.json({"id": 1}, 201, "Created", body_format=True)
        assert sent.status_code == 201
        assert json.loads(sent.body) == {"code": 201, "message": "Created", "data": {"id": 1}}

    def test_json_body_format_from_config(self, make_controller):
        controller = make_controller(config=DispatcherConfig(body_format=True))
        sent = controller.json(None, 401, "Login Required")
        assert json.loads(sent.body) == {"code": 401, "message": "Login Required", "data": None}

    def test_json_without_body_format_wraps_scalars(self, make_controller):
        sent = make_controller().json("hello")
        assert json.loads(sent.body) == ["hello"]

    def test_json_without_body_format_keeps_collections(self, make_controller):
        sent = make_controller().json({"a": 1})
        assert json.loads(sent.body) == {"a": 1}
