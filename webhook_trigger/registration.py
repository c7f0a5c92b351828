"""
Registration
============

Services register the triggers they emit at the webhooks service. The triggers are usually
defined in a YAML file:

..  code-block:: yaml
    :caption: Example of a trigger definition file

    - entity: order
      eventName: created
    - entity: order
      eventName: picked

The service code is taken from :code:`JANIS_SERVICE_NAME`.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from webhook_trigger.abc.exceptions import ValidationError
from webhook_trigger.connector.invoker import LambdaInvoker
from webhook_trigger.util.configuration import get_required_environment
from webhook_trigger.util.defaults import (
    ENV_NAME_ENDPOINT_URL,
    ENV_NAME_SERVICE_NAME,
    REGISTER_TRIGGERS_FUNCTION,
    WEBHOOKS_SERVICE,
)

logger = logging.getLogger("Registration")

yaml = YAML(typ="safe", pure=True)


def validate_triggers(triggers: Any) -> None:
    """Validates trigger definitions.

    Raises
    ------
    ValidationError
        Naming the first invalid trigger or trigger field, e.g. :code:`triggers.1.eventName`.
    """
    if not isinstance(triggers, list):
        raise ValidationError("triggers", "array", triggers)
    for index, trigger in enumerate(triggers):
        if not isinstance(trigger, Mapping):
            raise ValidationError(f"triggers.{index}", "object", trigger)
        for key in ("entity", "eventName"):
            value = trigger.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"triggers.{index}.{key}", "string", value)


class Registration:
    """Registers the triggers of a service."""

    def __init__(self, invoker: LambdaInvoker | None = None) -> None:
        self._invoker = invoker

    @property
    def invoker(self) -> LambdaInvoker:
        """the invoker used to call the webhooks service"""
        if self._invoker is None:
            self._invoker = LambdaInvoker(endpoint_url=os.environ.get(ENV_NAME_ENDPOINT_URL))
        return self._invoker

    def register(self, triggers: list[dict]) -> Any:
        """Registers all triggers of this service.

        Parameters
        ----------
        triggers : list[dict]
            The triggers, each with an :code:`entity` and an :code:`eventName`.

        Raises
        ------
        MissingEnvironmentError
            If :code:`JANIS_SERVICE_NAME` is not set.
        ValidationError
            If the triggers are invalid.
        RemoteInvocationError
            If the call to the webhooks service fails.
        """
        (service_name,) = get_required_environment(ENV_NAME_SERVICE_NAME)
        validate_triggers(triggers)
        logger.info("Registering %s triggers of service %s", len(triggers), service_name)
        return self.invoker.service_call(
            WEBHOOKS_SERVICE,
            REGISTER_TRIGGERS_FUNCTION,
            {"serviceCode": service_name, "triggers": triggers},
        )

    def register_from_file(self, triggers_path: str | Path) -> Any:
        """Reads the trigger definitions from a YAML file and registers them.

        A missing file means the service does not use webhook triggers and nothing is
        registered.

        Raises
        ------
        YAMLError
            If the file is not valid YAML.
        """
        logger.info("Reading your triggers...")
        try:
            triggers_string = Path(triggers_path).read_text(encoding="utf8")
        except FileNotFoundError:
            logger.info("Triggers definition file not found. Service does not use webhook triggers")
            return None
        try:
            triggers = yaml.load(triggers_string)
        except YAMLError:
            logger.error("Invalid triggers definition. It must be a valid YAML")
            raise
        try:
            return self.register(triggers)
        except Exception as error:
            logger.error("Failed to subscribe your webhook triggers: %s", error)
            raise
