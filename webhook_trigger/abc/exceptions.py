"""abstract module for exceptions"""

from typing import Any


class WebhookTriggerException(Exception):
    """Base class for webhook trigger related exceptions."""

    def __init__(self, message: str, *args) -> None:
        self.message = message
        super().__init__(message, *args)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WebhookTriggerException):
            return self.args == other.args
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.args)


class InvalidConfigurationError(WebhookTriggerException):
    """Raise if configuration is invalid."""


class MissingEnvironmentError(InvalidConfigurationError):
    """Raise if environment variables are missing"""

    def __init__(self, message: str) -> None:
        super().__init__(f"Environment variable(s) used, but not set: {message}")


class ValidationError(WebhookTriggerException, TypeError):
    """Raise if a field of an event or a trigger definition is invalid."""

    def __init__(self, field_name: str, expected_type: str, actual_value: Any) -> None:
        self.field_name = field_name
        self.expected_type = expected_type
        self.actual_value = actual_value
        super().__init__(
            f"Invalid {field_name}. Expected {expected_type} but received {actual_value!r}"
        )


class InputTypeError(WebhookTriggerException, TypeError):
    """Raise if the events of a batch are not given as a list."""

    def __init__(self, actual_value: Any) -> None:
        super().__init__(f"Invalid events. Expected list but received {actual_value!r}")


class TransportError(WebhookTriggerException):
    """A call to the queue provider failed - reported as failure outcome, never raised."""


class RemoteInvocationError(WebhookTriggerException):
    """A synchronous call to a remote service failed."""

    def __init__(self, service: str, function: str, message: str) -> None:
        self.service = service
        self.function = function
        super().__init__(f"Call to {service}.{function} failed: {message}")
