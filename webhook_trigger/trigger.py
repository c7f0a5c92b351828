"""
WebhookTrigger
==============

Entry point for services emitting webhook triggers.

..  code-block:: python
    :caption: Sending triggers

    trigger = WebhookTrigger()

    outcome = await trigger.send("clientA", "order", "created", {"id": 1})

    result = await trigger.send_batch(
        [
            {"clientCode": "clientA", "entity": "order", "eventName": "created", "content": {"id": 1}},
            {"clientCode": "clientB", "entity": "order", "eventName": "picked", "content": "..."},
        ]
    )

Without an explicit :code:`TriggerConfig` the configuration is read from the environment on
every call, so a missing :code:`JANIS_SERVICE_NAME` or :code:`JANIS_WEBHOOKS_QUEUE_URL` fails
the call before anything is sent.

Caller mistakes (configuration, invalid single events, batches that are not lists) are raised.
Failures of the queue are returned as :code:`Failure` outcomes.
"""

import asyncio
import logging
from typing import Any

from webhook_trigger.abc.exceptions import InputTypeError
from webhook_trigger.batch import BatchAssembler
from webhook_trigger.connector.invoker import LambdaInvoker
from webhook_trigger.connector.sqs import SQSDispatchClient
from webhook_trigger.event import Event
from webhook_trigger.outcome import BatchResult, Outcome
from webhook_trigger.util.configuration import TriggerConfig
from webhook_trigger.util.defaults import CREATE_EVENT_FUNCTION, WEBHOOKS_SERVICE

logger = logging.getLogger("WebhookTrigger")


class WebhookTrigger:
    """Sends webhook triggers to the webhooks service."""

    def __init__(
        self,
        config: TriggerConfig | None = None,
        dispatch_client: SQSDispatchClient | None = None,
        invoker: LambdaInvoker | None = None,
    ) -> None:
        if dispatch_client is not None and config is None:
            raise ValueError("a dispatch client requires an explicit config")
        self._config = config
        self._current_config = config
        self._current_client = dispatch_client
        self._invoker = invoker

    @property
    def config(self) -> TriggerConfig:
        """The explicit configuration or the one currently given by the environment.

        Raises
        ------
        MissingEnvironmentError
            If no explicit configuration is given and a required environment variable is
            missing.
        """
        if self._config is not None:
            return self._config
        return TriggerConfig.from_environment()

    def _dispatch_client(self, config: TriggerConfig) -> SQSDispatchClient:
        # only the client of the latest config is kept
        if self._current_client is None or self._current_config != config:
            self._current_client = SQSDispatchClient(config)
            self._current_config = config
        return self._current_client

    def close(self) -> None:
        """Releases the thread pool of the current dispatch client."""
        if self._current_client is not None:
            self._current_client.close()

    def _get_invoker(self, config: TriggerConfig) -> LambdaInvoker:
        if self._invoker is None:
            self._invoker = LambdaInvoker(
                function_name_template=config.function_name_template,
                endpoint_url=config.endpoint_url,
                region_name=config.region_name,
            )
        return self._invoker

    async def send(self, client_code: str, entity: str, event_name: str, content: Any) -> Outcome:
        """Sends one webhook trigger to the queue.

        Parameters
        ----------
        client_code : str
            The client code.
        entity : str
            The entity associated to this trigger.
        event_name : str
            The name of the event associated to this trigger.
        content : str | dict | list
            The content of the trigger. Everything but strings is JSON encoded.

        Returns
        -------
        Success | Failure
            :code:`Failure` if the queue did not accept the message.

        Raises
        ------
        MissingEnvironmentError
            If the configuration is missing.
        ValidationError
            If the event is invalid.
        """
        config = self.config
        event = Event(client_code, entity, event_name, content)
        payload = event.to_payload(config.service_name)
        return await self._dispatch_client(config).send_message(client_code, payload)

    async def send_batch(self, events: list) -> BatchResult:
        """Sends a list of webhook triggers to the queue.

        Invalid events are reported as failures and do not stop the others. Valid events are
        sent in batches of :code:`max_batch_size` with at most :code:`max_concurrency` batches
        in flight.

        Parameters
        ----------
        events : list
            :code:`Event` instances or mappings with the keys :code:`clientCode`,
            :code:`entity`, :code:`eventName` and :code:`content`.

        Returns
        -------
        BatchResult
            One outcome per event. The order of the outcomes does not follow the order of the
            events.

        Raises
        ------
        MissingEnvironmentError
            If the configuration is missing.
        InputTypeError
            If :code:`events` is not a list.
        """
        config = self.config
        if not isinstance(events, (list, tuple)):
            raise InputTypeError(events)
        assembled = BatchAssembler(config.service_name, config.max_batch_size).assemble(events)
        result = BatchResult(error_count=len(assembled.failures), outputs=[*assembled.failures])
        if not assembled.batches:
            logger.info("No valid events to send, %s invalid", result.error_count)
            return result
        return await self._dispatch_client(config).send_message_batch(assembled.batches, result)

    async def send_direct(
        self, client_code: str, entity: str, event_name: str, content: Any
    ) -> Any:
        """Sends one webhook trigger directly to the webhooks service and waits for its
        response.

        Raises
        ------
        MissingEnvironmentError
            If the configuration is missing.
        ValidationError
            If the event is invalid.
        RemoteInvocationError
            If the call to the webhooks service fails.
        """
        config = self.config
        event = Event(client_code, entity, event_name, content)
        payload = {"clientCode": client_code, **event.to_payload(config.service_name)}
        invoker = self._get_invoker(config)
        return await asyncio.to_thread(
            invoker.service_call, WEBHOOKS_SERVICE, CREATE_EVENT_FUNCTION, payload
        )
