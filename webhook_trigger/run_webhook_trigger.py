"""This module can be used to send and register webhook triggers from the command line."""

import asyncio
import logging
import sys
from pathlib import Path

import click
import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from webhook_trigger.abc.exceptions import (
    InvalidConfigurationError,
    RemoteInvocationError,
    ValidationError,
)
from webhook_trigger.event import decode, encode
from webhook_trigger.registration import Registration
from webhook_trigger.trigger import WebhookTrigger
from webhook_trigger.util.defaults import DEFAULT_TRIGGERS_PATH, EXITCODES
from webhook_trigger.util.logging import setup_logging

logger = logging.getLogger("webhook_trigger")

yaml = YAML(typ="safe", pure=True)


def _parse_content(content: str):
    try:
        decoded = decode(content)
    except msgspec.DecodeError:
        return content
    return decoded if isinstance(decoded, (dict, list)) else content


def _fail(error: Exception, exit_code: EXITCODES) -> None:
    click.echo(f"{error.__class__.__name__}: {error}", err=True)
    sys.exit(exit_code.value)


@click.group(name="webhook-trigger")
@click.option(
    "--loglevel",
    help="Log level of the root logger.",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
def cli(loglevel: str) -> None:
    """
    Send webhook triggers to the webhooks service and register the triggers of a service.
    The configuration is read from the environment.
    """
    setup_logging(loglevel)


@cli.command(short_help="Send a single webhook trigger")
@click.argument("client_code")
@click.argument("entity")
@click.argument("event_name")
@click.argument("content")
def send(client_code: str, entity: str, event_name: str, content: str) -> None:
    """
    Send one webhook trigger to the webhooks queue and print the outcome.

    \b
    CONTENT is decoded as JSON if possible, otherwise it is sent as plain string.
    """
    trigger = WebhookTrigger()
    try:
        outcome = asyncio.run(
            trigger.send(client_code, entity, event_name, _parse_content(content))
        )
    except InvalidConfigurationError as error:
        _fail(error, EXITCODES.CONFIGURATION_ERROR)
    except ValidationError as error:
        _fail(error, EXITCODES.ERROR)
    finally:
        trigger.close()
    click.echo(encode(outcome.as_dict()))
    if not outcome.success:
        sys.exit(EXITCODES.ERROR.value)


@cli.command(name="send-batch", short_help="Send webhook triggers from a file")
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def send_batch(events_file: Path) -> None:
    """
    Send all webhook triggers of a file and print the result.

    EVENTS_FILE is a JSON or YAML file holding a list of events with the keys
    clientCode, entity, eventName and content.
    """
    try:
        events = yaml.load(events_file.read_text(encoding="utf8"))
    except YAMLError as error:
        _fail(error, EXITCODES.ERROR)
    trigger = WebhookTrigger()
    try:
        result = asyncio.run(trigger.send_batch(events))
    except InvalidConfigurationError as error:
        _fail(error, EXITCODES.CONFIGURATION_ERROR)
    except TypeError as error:
        _fail(error, EXITCODES.ERROR)
    finally:
        trigger.close()
    click.echo(encode(result.as_dict()))
    if result.error_count:
        sys.exit(EXITCODES.ERROR.value)


@cli.command(short_help="Register the webhook triggers of a service")
@click.argument("triggers_file", default=DEFAULT_TRIGGERS_PATH, required=False)
def register(triggers_file: str) -> None:
    """
    Register the triggers defined in a YAML file at the webhooks service.

    TRIGGERS_FILE defaults to schemas/webhook-triggers.yml. If it does not exist nothing is
    registered.
    """
    try:
        Registration().register_from_file(triggers_file)
    except InvalidConfigurationError as error:
        _fail(error, EXITCODES.CONFIGURATION_ERROR)
    except (YAMLError, ValidationError, RemoteInvocationError) as error:
        _fail(error, EXITCODES.ERROR)


if __name__ == "__main__":
    cli()  # pylint: disable=no-value-for-parameter
