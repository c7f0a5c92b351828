"""helper classes for webhook trigger logging"""

import logging
import logging.config
from copy import deepcopy
from socket import gethostname

from webhook_trigger.util.defaults import DEFAULT_LOG_CONFIG


class WebhookTriggerFormatter(logging.Formatter):
    """
    A custom formatter for webhook trigger logging with additional attributes.

    Additionally to the standard
    `LogRecord attributes <https://docs.python.org/3/library/logging.html#logrecord-attributes>`_
    the formatter provides:

    .. table::

        +-----------------------+--------------------------------------------------+
        | attribute             | description                                      |
        +=======================+==================================================+
        | %(hostname)           | The hostname of the machine where the log was    |
        |                       | emitted                                          |
        +-----------------------+--------------------------------------------------+

    """

    def format(self, record):
        record.hostname = gethostname()
        return super().format(record)


def setup_logging(level: str | None = None) -> None:
    """Configures logging from :code:`DEFAULT_LOG_CONFIG`, optionally overriding
    the root log level."""
    log_config = deepcopy(DEFAULT_LOG_CONFIG)
    if level is not None:
        log_config["loggers"]["root"]["level"] = level.upper()
    logging.config.dictConfig(log_config)
