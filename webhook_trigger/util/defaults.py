"""Default values for webhook trigger."""

from enum import IntEnum


class EXITCODES(IntEnum):
    """Exit codes for the webhook trigger cli."""

    SUCCESS = 0
    """Successful execution."""
    ERROR = 1
    """General unspecified error."""
    CONFIGURATION_ERROR = 2
    """An error in the configuration."""


ENV_NAME_SERVICE_NAME = "JANIS_SERVICE_NAME"
ENV_NAME_QUEUE_URL = "JANIS_WEBHOOKS_QUEUE_URL"
ENV_NAME_MAX_CONCURRENCY = "WEBHOOK_TRIGGER_MAX_CONCURRENCY"
ENV_NAME_SEND_TIMEOUT = "WEBHOOK_TRIGGER_SEND_TIMEOUT"
ENV_NAME_ENDPOINT_URL = "WEBHOOK_TRIGGER_ENDPOINT_URL"

WEBHOOKS_SERVICE = "webhooks"
CREATE_EVENT_FUNCTION = "CreateEvent"
REGISTER_TRIGGERS_FUNCTION = "RegisterServiceTriggers"

DEFAULT_MAX_CONCURRENCY = 25
SQS_MAX_BATCH_SIZE = 10
DEFAULT_CLIENT_ATTRIBUTE_NAME = "janis-client"
DEFAULT_FUNCTION_NAME_TEMPLATE = "{service}-{function}"
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_TRIGGERS_PATH = "schemas/webhook-triggers.yml"

DEFAULT_LOG_FORMAT = "%(asctime)-15s %(hostname)-10s %(name)-10s %(levelname)-8s: %(message)s"
DEFAULT_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# dictconfig as described in
# https://docs.python.org/3/library/logging.config.html#configuration-dictionary-schema
DEFAULT_LOG_CONFIG: dict = {
    "version": 1,
    "formatters": {
        "webhook_trigger": {
            "class": "webhook_trigger.util.logging.WebhookTriggerFormatter",
            "format": DEFAULT_LOG_FORMAT,
            "datefmt": DEFAULT_LOG_DATE_FORMAT,
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "webhook_trigger",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "root": {"level": "INFO", "handlers": ["console"]},
        "botocore": {"level": "WARNING"},
        "urllib3.connectionpool": {"level": "ERROR"},
    },
    "filters": {},
    "disable_existing_loggers": False,
}
