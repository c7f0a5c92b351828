"""
LambdaInvoker
=============

Synchronous service to service calls. A call to :code:`function` of :code:`service` invokes
the AWS lambda function named by the configured :code:`function_name_template`
(:code:`{service}-{function}` by default) with a JSON payload and returns the decoded
response payload.
"""

import logging
from functools import cached_property
from typing import Any

import boto3
import msgspec
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from webhook_trigger.abc.exceptions import RemoteInvocationError
from webhook_trigger.event import decode, encode
from webhook_trigger.util.defaults import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_FUNCTION_NAME_TEMPLATE,
    DEFAULT_MAX_RETRIES,
)

logger = logging.getLogger("LambdaInvoker")


class LambdaInvoker:
    """Calls functions of other services."""

    def __init__(
        self,
        function_name_template: str = DEFAULT_FUNCTION_NAME_TEMPLATE,
        endpoint_url: str | None = None,
        region_name: str | None = None,
        lambda_client: Any = None,
    ) -> None:
        self._function_name_template = function_name_template
        self._endpoint_url = endpoint_url
        self._region_name = region_name
        if lambda_client is not None:
            self.__dict__["_lambda_client"] = lambda_client

    @cached_property
    def _lambda_client(self) -> Any:
        session = boto3.Session(region_name=self._region_name)
        config = BotoConfig(
            connect_timeout=DEFAULT_CONNECT_TIMEOUT,
            retries={"max_attempts": DEFAULT_MAX_RETRIES},
        )
        return session.client("lambda", endpoint_url=self._endpoint_url, config=config)

    def function_name(self, service: str, function: str) -> str:
        """returns the lambda function name of a service function"""
        return self._function_name_template.format(service=service, function=function)

    def service_call(self, service: str, function: str, payload: Any) -> Any:
        """Invokes a function of a service and waits for its response.

        Parameters
        ----------
        service : str
            The code of the called service, e.g. :code:`webhooks`.
        function : str
            The name of the called function.
        payload : Any
            JSON serializable request payload.

        Returns
        -------
        Any
            The decoded response payload, :code:`None` for an empty response.

        Raises
        ------
        RemoteInvocationError
            If the call fails or the function reports an error.
        """
        function_name = self.function_name(service, function)
        logger.debug("Invoking %s", function_name)
        try:
            response = self._lambda_client.invoke(
                FunctionName=function_name,
                InvocationType="RequestResponse",
                Payload=encode(payload).encode("utf-8"),
            )
            raw_payload = response["Payload"].read()
        except (BotoCoreError, ClientError) as error:
            raise RemoteInvocationError(service, function, str(error)) from error
        try:
            response_payload = decode(raw_payload) if raw_payload else None
        except msgspec.DecodeError as error:
            raise RemoteInvocationError(service, function, "Invalid response payload") from error
        if response.get("FunctionError"):
            raise RemoteInvocationError(service, function, self._remote_error(response_payload))
        return response_payload

    @staticmethod
    def _remote_error(response_payload: Any) -> str:
        if isinstance(response_payload, dict):
            return str(response_payload.get("errorMessage") or response_payload)
        return str(response_payload)
