"""
Events
======

An :code:`Event` is one request to trigger a webhook. It is validated before anything is sent
and converted into the wire payload the webhooks service expects:

..  code-block:: json

    {
        "service": "catalog",
        "entity": "order",
        "eventName": "created",
        "content": "{\\"id\\":1}"
    }

The client code is not part of the payload. It travels as message attribute.
"""

from collections.abc import Mapping
from typing import Any

import msgspec
from attrs import define, field

from webhook_trigger.abc.exceptions import ValidationError

_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder()

Content = str | Mapping | list


def _is_blank_or_not_str(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_event(client_code: Any, entity: Any, event_name: Any, content: Any) -> None:
    """Validates the fields of an event. The first invalid field is reported.

    Raises
    ------
    ValidationError
        If a field is invalid.
    """
    if _is_blank_or_not_str(client_code):
        raise ValidationError("clientCode", "string", client_code)
    if _is_blank_or_not_str(entity):
        raise ValidationError("entity", "string", entity)
    if _is_blank_or_not_str(event_name):
        raise ValidationError("eventName", "string", event_name)
    if isinstance(content, str):
        if not content.strip():
            raise ValidationError("content", "string | object", content)
    elif not isinstance(content, (Mapping, list, tuple)):
        raise ValidationError("content", "string | object", content)


def encode(document: Any) -> str:
    """JSON encodes a document"""
    return _encoder.encode(document).decode("utf-8")


def decode(document: str | bytes) -> Any:
    """Decodes a JSON document"""
    return _decoder.decode(document)


@define(frozen=True)
class Event:
    """One webhook trigger as given by the caller."""

    client_code: str = field()
    entity: str = field()
    event_name: str = field()
    content: Content = field()

    @classmethod
    def from_dict(cls, document: Any) -> "Event":
        """Creates an event from a mapping with the keys :code:`clientCode`, :code:`entity`,
        :code:`eventName` and :code:`content`. Instances of :code:`Event` are returned as is.

        Raises
        ------
        ValidationError
            If :code:`document` is neither an :code:`Event` nor a mapping.
        """
        if isinstance(document, cls):
            return document
        if not isinstance(document, Mapping):
            raise ValidationError("event", "object", document)
        return cls(
            client_code=document.get("clientCode"),
            entity=document.get("entity"),
            event_name=document.get("eventName"),
            content=document.get("content"),
        )

    def validate(self) -> "Event":
        """Validates the event and returns it.

        Raises
        ------
        ValidationError
            If a field is invalid.
        """
        validate_event(self.client_code, self.entity, self.event_name, self.content)
        return self

    def encoded_content(self) -> str:
        """Returns the content as string, JSON encoding structured content.

        Raises
        ------
        ValidationError
            If the content can not be encoded as JSON.
        """
        if isinstance(self.content, str):
            return self.content
        try:
            return encode(self.content)
        except (msgspec.EncodeError, TypeError, OverflowError) as error:
            raise ValidationError("content", "JSON serializable object", self.content) from error

    def to_payload(self, service_name: str) -> dict:
        """Builds the wire payload sent to the webhooks service.

        Raises
        ------
        ValidationError
            If the event is invalid.
        """
        self.validate()
        return {
            "service": service_name,
            "entity": self.entity,
            "eventName": self.event_name,
            "content": self.encoded_content(),
        }

    def as_dict(self) -> dict:
        """Returns the event with its wire field names"""
        return {
            "clientCode": self.client_code,
            "entity": self.entity,
            "eventName": self.event_name,
            "content": self.content,
        }
