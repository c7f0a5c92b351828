"""Global configuration and fixtures for all pytest-based tests"""

from unittest import mock

import pytest

from tests.testdata.metadata import MESSAGE_ID, QUEUE_URL, SERVICE_NAME, all_successful
from webhook_trigger.connector.sqs import SQSDispatchClient
from webhook_trigger.util.configuration import TriggerConfig


@pytest.fixture(name="trigger_config")
def fixture_trigger_config():
    return TriggerConfig(service_name=SERVICE_NAME, queue_url=QUEUE_URL)


@pytest.fixture(name="sqs_client")
def fixture_sqs_client():
    client = mock.MagicMock()
    client.send_message.return_value = {"MessageId": MESSAGE_ID}
    client.send_message_batch.side_effect = all_successful
    return client


@pytest.fixture(name="dispatch_client")
def fixture_dispatch_client(trigger_config, sqs_client):
    dispatch_client = SQSDispatchClient(trigger_config, sqs_client=sqs_client)
    yield dispatch_client
    dispatch_client.close()


@pytest.fixture(name="environment")
def fixture_environment(monkeypatch):
    monkeypatch.setenv("JANIS_SERVICE_NAME", SERVICE_NAME)
    monkeypatch.setenv("JANIS_WEBHOOKS_QUEUE_URL", QUEUE_URL)
    return monkeypatch
