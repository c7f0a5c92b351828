"""
Configuration
=============

The webhook trigger is configured with a :code:`TriggerConfig`. It can be created explicitly
and passed to :code:`WebhookTrigger`, or it is read from the environment on every call.

The following environment variables are used:

.. csv-table::
    :header: "variable", "required", "description"

    "JANIS_SERVICE_NAME", "yes", "The code of the service emitting the triggers"
    "JANIS_WEBHOOKS_QUEUE_URL", "yes", "The url of the webhooks SQS queue"
    "WEBHOOK_TRIGGER_MAX_CONCURRENCY", "no", "Maximum number of batch sends in flight (25)"
    "WEBHOOK_TRIGGER_SEND_TIMEOUT", "no", "Timeout in seconds for a single queue call"
    "WEBHOOK_TRIGGER_ENDPOINT_URL", "no", "Endpoint override for the SQS and Lambda clients"

Blank values are treated like missing values.

..  code-block:: python
    :caption: Example of an explicit configuration

    config = TriggerConfig(
        service_name="catalog",
        queue_url="https://sqs.us-east-1.amazonaws.com/123456789012/webhooks",
        max_concurrency=10,
    )
    trigger = WebhookTrigger(config)
"""

import os
from typing import Mapping, Optional

from attrs import converters, define, field, validators

from webhook_trigger.abc.exceptions import InvalidConfigurationError, MissingEnvironmentError
from webhook_trigger.util.defaults import (
    DEFAULT_CLIENT_ATTRIBUTE_NAME,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_FUNCTION_NAME_TEMPLATE,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_RETRIES,
    ENV_NAME_ENDPOINT_URL,
    ENV_NAME_MAX_CONCURRENCY,
    ENV_NAME_QUEUE_URL,
    ENV_NAME_SEND_TIMEOUT,
    ENV_NAME_SERVICE_NAME,
    SQS_MAX_BATCH_SIZE,
)


def _not_blank(_, attribute, value: str) -> None:
    if not value.strip():
        raise ValueError(f"'{attribute.name}' must not be blank")


def get_required_environment(*names: str, environment: Optional[Mapping] = None) -> list[str]:
    """Returns the values of the given environment variables in the given order.

    Parameters
    ----------
    names : str
        Names of the required variables.
    environment : Mapping, optional
        The environment to read from, defaults to :code:`os.environ`.

    Raises
    ------
    MissingEnvironmentError
        If at least one variable is unset or blank. All missing names are reported.
    """
    environment = os.environ if environment is None else environment
    values = [environment.get(name, "") for name in names]
    missing = [name for name, value in zip(names, values) if not value.strip()]
    if missing:
        raise MissingEnvironmentError(", ".join(missing))
    return values


@define(kw_only=True, frozen=True)
class TriggerConfig:
    """The configuration of the webhook trigger."""

    service_name: str = field(validator=[validators.instance_of(str), _not_blank])
    """The code of the service emitting the triggers. Added as :code:`service` to every
    message."""
    queue_url: str = field(validator=[validators.instance_of(str), _not_blank])
    """The url of the webhooks SQS queue."""
    message_attribute_name: str = field(
        validator=[validators.instance_of(str), _not_blank], default=DEFAULT_CLIENT_ATTRIBUTE_NAME
    )
    """The SQS message attribute carrying the client code. Defaults to
    :code:`janis-client`."""
    max_batch_size: int = field(
        validator=[
            validators.instance_of(int),
            validators.ge(1),
            validators.le(SQS_MAX_BATCH_SIZE),
        ],
        default=SQS_MAX_BATCH_SIZE,
    )
    """Number of messages per batch send. SQS accepts at most 10, which is the default."""
    max_concurrency: int = field(
        validator=[validators.instance_of(int), validators.gt(0)],
        default=DEFAULT_MAX_CONCURRENCY,
    )
    """Maximum number of batch sends in flight at the same time (default is 25)."""
    send_timeout: Optional[float] = field(
        converter=converters.optional(float),
        validator=validators.optional(validators.gt(0)),
        default=None,
    )
    """(Optional) Read timeout in seconds for a single queue call, passed to botocore as
    :code:`read_timeout`. A timed out call is reported as failure for all messages it carried,
    although the queue may already have accepted them. Unset by default."""
    endpoint_url: Optional[str] = field(
        validator=validators.optional(validators.instance_of(str)), default=None
    )
    """(Optional) Endpoint override for the AWS clients, e.g. a local SQS."""
    region_name: Optional[str] = field(
        validator=validators.optional(validators.instance_of(str)), default=None
    )
    """(Optional) AWS region. Resolved by boto3 if not set."""
    connect_timeout: float = field(
        converter=float, validator=validators.gt(0), default=DEFAULT_CONNECT_TIMEOUT
    )
    """Connect timeout of the AWS clients in seconds."""
    max_retries: int = field(
        validator=[validators.instance_of(int), validators.ge(0)], default=DEFAULT_MAX_RETRIES
    )
    """Maximum retry attempts of the AWS clients."""
    function_name_template: str = field(
        validator=validators.instance_of(str), default=DEFAULT_FUNCTION_NAME_TEMPLATE
    )
    """Template for the lambda function names used by direct service calls. Supports the
    placeholders :code:`{service}` and :code:`{function}`."""

    @classmethod
    def from_environment(cls, environment: Optional[Mapping] = None) -> "TriggerConfig":
        """Creates the configuration from environment variables.

        Raises
        ------
        MissingEnvironmentError
            If :code:`JANIS_SERVICE_NAME` or :code:`JANIS_WEBHOOKS_QUEUE_URL` is missing.
        InvalidConfigurationError
            If an optional variable holds an invalid value.
        """
        environment = os.environ if environment is None else environment
        service_name, queue_url = get_required_environment(
            ENV_NAME_SERVICE_NAME, ENV_NAME_QUEUE_URL, environment=environment
        )
        kwargs = {"service_name": service_name, "queue_url": queue_url}
        try:
            if environment.get(ENV_NAME_MAX_CONCURRENCY):
                kwargs["max_concurrency"] = int(environment[ENV_NAME_MAX_CONCURRENCY])
            if environment.get(ENV_NAME_SEND_TIMEOUT):
                kwargs["send_timeout"] = environment[ENV_NAME_SEND_TIMEOUT]
            if environment.get(ENV_NAME_ENDPOINT_URL):
                kwargs["endpoint_url"] = environment[ENV_NAME_ENDPOINT_URL]
            return cls(**kwargs)
        except (TypeError, ValueError) as error:
            raise InvalidConfigurationError(str(error)) from error
