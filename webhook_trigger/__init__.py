"""Emit webhook triggers to the webhooks service."""

from webhook_trigger.abc.exceptions import (
    InputTypeError,
    InvalidConfigurationError,
    MissingEnvironmentError,
    RemoteInvocationError,
    TransportError,
    ValidationError,
    WebhookTriggerException,
)
from webhook_trigger.event import Event
from webhook_trigger.outcome import BatchResult, Failure, Success
from webhook_trigger.registration import Registration
from webhook_trigger.trigger import WebhookTrigger
from webhook_trigger.util.configuration import TriggerConfig

__all__ = [
    "BatchResult",
    "Event",
    "Failure",
    "InputTypeError",
    "InvalidConfigurationError",
    "MissingEnvironmentError",
    "Registration",
    "RemoteInvocationError",
    "Success",
    "TransportError",
    "TriggerConfig",
    "ValidationError",
    "WebhookTrigger",
    "WebhookTriggerException",
]
