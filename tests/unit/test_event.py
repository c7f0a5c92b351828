# pylint: disable=missing-docstring
import pytest

from webhook_trigger.abc.exceptions import ValidationError
from webhook_trigger.event import Event, decode, encode, validate_event

CLIENT_CODE = "defaultClient"
ENTITY = "order"
EVENT_NAME = "created"
CONTENT = {"id": "d555345345345as67a342a"}
CONTENT_STRING = '{"id":"d555345345345as67a342a"}'


class TestValidateEvent:
    @pytest.mark.parametrize(
        "client_code, entity, event_name, content, field_name",
        [
            (["invalid"], ENTITY, EVENT_NAME, CONTENT, "clientCode"),
            (" ", ENTITY, EVENT_NAME, CONTENT, "clientCode"),
            (None, ENTITY, EVENT_NAME, CONTENT, "clientCode"),
            (CLIENT_CODE, ["invalid"], EVENT_NAME, CONTENT, "entity"),
            (CLIENT_CODE, " ", EVENT_NAME, CONTENT, "entity"),
            (CLIENT_CODE, ENTITY, ["invalid"], CONTENT, "eventName"),
            (CLIENT_CODE, ENTITY, " ", CONTENT, "eventName"),
            (CLIENT_CODE, ENTITY, EVENT_NAME, None, "content"),
            (CLIENT_CODE, ENTITY, EVENT_NAME, " ", "content"),
            (CLIENT_CODE, ENTITY, EVENT_NAME, 100, "content"),
            (CLIENT_CODE, ENTITY, EVENT_NAME, True, "content"),
        ],
    )
    def test_invalid_field_is_reported(self, client_code, entity, event_name, content, field_name):
        with pytest.raises(ValidationError, match=rf"Invalid {field_name}\.") as error:
            validate_event(client_code, entity, event_name, content)
        assert error.value.field_name == field_name

    def test_first_invalid_field_wins(self):
        with pytest.raises(ValidationError) as error:
            validate_event(" ", None, None, None)
        assert error.value.field_name == "clientCode"

    def test_error_message_contains_expected_type_and_value(self):
        with pytest.raises(ValidationError) as error:
            validate_event(CLIENT_CODE, ENTITY, EVENT_NAME, 100)
        assert error.value.message == "Invalid content. Expected string | object but received 100"
        assert error.value.expected_type == "string | object"
        assert error.value.actual_value == 100

    def test_validation_error_is_a_type_error(self):
        with pytest.raises(TypeError):
            validate_event(["invalid"], ENTITY, EVENT_NAME, CONTENT)

    @pytest.mark.parametrize("content", [CONTENT, CONTENT_STRING, {}, [], [1, 2], "plain text"])
    def test_valid_event_passes(self, content):
        validate_event(CLIENT_CODE, ENTITY, EVENT_NAME, content)

    def test_revalidating_a_valid_event_does_not_raise(self):
        event = Event(CLIENT_CODE, ENTITY, EVENT_NAME, CONTENT)
        assert event.validate().validate() is event


class TestEvent:
    def test_to_payload_encodes_structured_content(self):
        event = Event(CLIENT_CODE, ENTITY, EVENT_NAME, CONTENT)
        assert event.to_payload("MY_SERVICE") == {
            "service": "MY_SERVICE",
            "entity": ENTITY,
            "eventName": EVENT_NAME,
            "content": CONTENT_STRING,
        }

    def test_to_payload_keeps_string_content(self):
        event = Event(CLIENT_CODE, ENTITY, EVENT_NAME, CONTENT_STRING)
        assert event.to_payload("MY_SERVICE")["content"] == CONTENT_STRING

    def test_to_payload_validates(self):
        with pytest.raises(ValidationError, match="entity"):
            Event(CLIENT_CODE, "", EVENT_NAME, CONTENT).to_payload("MY_SERVICE")

    def test_not_serializable_content_is_invalid(self):
        event = Event(CLIENT_CODE, ENTITY, EVENT_NAME, {"value": object()})
        with pytest.raises(ValidationError, match="Invalid content. Expected JSON serializable"):
            event.to_payload("MY_SERVICE")

    def test_from_dict(self):
        event = Event.from_dict(
            {"clientCode": CLIENT_CODE, "entity": ENTITY, "eventName": EVENT_NAME, "content": 1}
        )
        assert event == Event(CLIENT_CODE, ENTITY, EVENT_NAME, 1)

    def test_from_dict_returns_events_unchanged(self):
        event = Event(CLIENT_CODE, ENTITY, EVENT_NAME, CONTENT)
        assert Event.from_dict(event) is event

    def test_from_dict_missing_keys_are_none(self):
        event = Event.from_dict({"clientCode": CLIENT_CODE})
        assert event.entity is None
        with pytest.raises(ValidationError, match="entity"):
            event.validate()

    @pytest.mark.parametrize("document", [None, "event", 1, ["clientCode"]])
    def test_from_dict_rejects_non_mappings(self, document):
        with pytest.raises(ValidationError, match="Invalid event. Expected object"):
            Event.from_dict(document)

    def test_as_dict_uses_wire_names(self):
        event = Event(CLIENT_CODE, ENTITY, EVENT_NAME, CONTENT)
        assert event.as_dict() == {
            "clientCode": CLIENT_CODE,
            "entity": ENTITY,
            "eventName": EVENT_NAME,
            "content": CONTENT,
        }


class TestJsonHelpers:
    def test_encode_is_compact(self):
        assert encode({"id": 1, "name": "a"}) == '{"id":1,"name":"a"}'

    def test_decode(self):
        assert decode('{"id":1}') == {"id": 1}
        assert decode(b'{"id":1}') == {"id": 1}
