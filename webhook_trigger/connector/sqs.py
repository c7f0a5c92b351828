"""
SQSDispatchClient
=================

Sends webhook trigger messages to the webhooks SQS queue.

Single messages are sent with :code:`SendMessage`, batches with :code:`SendMessageBatch`.
Batches are sent with bounded concurrency (:code:`max_concurrency`, 25 by default). The
blocking boto3 calls run on a thread pool owned by the client with :code:`max_concurrency`
workers. A :code:`send_timeout` is enforced by botocore as read timeout, so a timed out call
never keeps running in the background. A batch reported as timed out may still have been
delivered.
The client code of every message is sent as string message attribute
(:code:`janis-client` by default).

Errors of the queue provider never escape this client. They are reported as
:code:`Failure` outcomes carrying the original message and the error message.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import cached_property, partial, wraps
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from webhook_trigger.abc.exceptions import TransportError
from webhook_trigger.batch import Batch
from webhook_trigger.event import encode
from webhook_trigger.outcome import BatchResult, Failure, Outcome, Success
from webhook_trigger.util.async_helpers import BoundedConcurrencyRunner, TaskResult
from webhook_trigger.util.configuration import TriggerConfig

logger = logging.getLogger("SQSDispatchClient")


def _handle_sqs_error(func):
    @wraps(func)
    async def _inner(self: "SQSDispatchClient", *args) -> Any:
        try:
            return await func(self, *args)
        except EndpointConnectionError as error:
            raise TransportError("Could not connect to the endpoint URL") from error
        except ConnectionClosedError as error:
            raise TransportError(
                "Connection was closed before we received a valid response from endpoint URL"
            ) from error
        except ReadTimeoutError as error:
            raise TransportError(
                f"No response from queue within {self._config.send_timeout} seconds"
            ) from error
        except (BotoCoreError, ClientError) as error:
            raise TransportError(str(error)) from error

    return _inner


class SQSDispatchClient:
    """Sends single messages and batches of messages to the webhooks queue."""

    def __init__(self, config: TriggerConfig, sqs_client: Any = None) -> None:
        self._config = config
        if sqs_client is not None:
            self.__dict__["_sqs_client"] = sqs_client

    @cached_property
    def _sqs_client(self) -> Any:
        session = boto3.Session(region_name=self._config.region_name)
        config = {
            "connect_timeout": self._config.connect_timeout,
            "retries": {"max_attempts": self._config.max_retries},
            "max_pool_connections": self._config.max_concurrency,
        }
        if self._config.send_timeout is not None:
            config["read_timeout"] = self._config.send_timeout
        return session.client(
            "sqs", endpoint_url=self._config.endpoint_url, config=BotoConfig(**config)
        )

    @cached_property
    def _executor(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(
            max_workers=self._config.max_concurrency, thread_name_prefix="sqs-dispatch"
        )

    def close(self) -> None:
        """Shuts down the thread pool of this client. Running calls are finished."""
        executor = self.__dict__.pop("_executor", None)
        if executor is not None:
            executor.shutdown(wait=False)

    def describe(self) -> str:
        """returns the queue this client sends to"""
        return f"SQSDispatchClient - Queue: {self._config.queue_url}"

    def _message_attributes(self, client_code: str) -> dict:
        return {
            self._config.message_attribute_name: {
                "DataType": "String",
                "StringValue": client_code,
            }
        }

    async def _call(self, method, **kwargs) -> dict:
        """Runs a blocking boto3 call on the thread pool of this client."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(method, **kwargs))

    async def send_message(self, client_code: str, message: dict) -> Outcome:
        """Sends one message to the queue.

        Parameters
        ----------
        client_code : str
            The client the message belongs to.
        message : dict
            The wire payload.

        Returns
        -------
        Success | Failure
            Failures carry the original message including the client code.
        """
        try:
            response = await self._send_message(client_code, message)
        except TransportError as error:
            logger.warning("Could not send message of client %s: %s", client_code, error.message)
            return Failure({"clientCode": client_code, **message}, error.message)
        logger.debug("Sent message %s", response["MessageId"])
        return Success(response["MessageId"])

    @_handle_sqs_error
    async def _send_message(self, client_code: str, message: dict) -> dict:
        return await self._call(
            self._sqs_client.send_message,
            QueueUrl=self._config.queue_url,
            MessageBody=encode(message),
            MessageAttributes=self._message_attributes(client_code),
        )

    async def send_message_batch(
        self,
        batches: list[Batch],
        base_result: BatchResult | None = None,
        max_concurrency: int | None = None,
    ) -> BatchResult:
        """Sends all batches to the queue and reports every entry.

        Parameters
        ----------
        batches : list[Batch]
            Batches of at most :code:`max_batch_size` entries. Entry ids must be unique over
            all batches.
        base_result : BatchResult, optional
            Result to add the outcomes to, e.g. holding the validation failures.
        max_concurrency : int, optional
            Lowers the configured number of batch sends in flight. Values above the configured
            :code:`max_concurrency` are capped by the thread pool of this client.

        Returns
        -------
        BatchResult
            One outcome per entry. The outcomes of a batch keep the order reported by the
            queue, batches are added in the order they were given.
        """
        result = base_result if base_result is not None else BatchResult()
        if not batches:
            return result
        runner = BoundedConcurrencyRunner(
            self._send_batch,
            max_concurrency if max_concurrency is not None else self._config.max_concurrency,
        )
        logger.debug("Sending %s batches to %s", len(batches), self._config.queue_url)
        task_results = await runner.run(batches)
        for batch, task_result in zip(batches, task_results):
            self._add_batch_outcomes(result, batch, task_result)
        logger.info(
            "Sent batch messages: %s successful, %s failed",
            result.success_count,
            result.error_count,
        )
        return result

    @_handle_sqs_error
    async def _send_batch(self, batch: Batch) -> dict:
        attribute_name = self._config.message_attribute_name
        return await self._call(
            self._sqs_client.send_message_batch,
            QueueUrl=self._config.queue_url,
            Entries=[entry.to_request_entry(attribute_name) for entry in batch],
        )

    @staticmethod
    def _add_batch_outcomes(result: BatchResult, batch: Batch, task_result: TaskResult) -> None:
        if task_result.failed:
            error_message = str(task_result.error) or task_result.error.__class__.__name__
            logger.warning("Could not send batch of %s messages: %s", len(batch), error_message)
            for entry in batch:
                result.add_failure(entry.original_message(), error_message)
            return
        response = task_result.value or {}
        for successful in response.get("Successful") or []:
            result.add_success(successful["MessageId"])
        failed_entries = response.get("Failed") or []
        if not failed_entries:
            return
        entries_by_id = {entry.id: entry for entry in batch}
        for failed in failed_entries:
            entry = entries_by_id.get(failed.get("Id"))
            if entry is None:
                logger.warning("Queue reported failed entry with unknown id: %s", failed)
                continue
            result.add_failure(
                entry.original_message(), failed.get("Message") or failed.get("Code", "")
            )
