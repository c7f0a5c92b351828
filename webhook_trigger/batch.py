"""
Batch assembling
================

Validates the events of a batch send and groups the valid ones into batches fitting a single
:code:`SendMessageBatch` call. Invalid events do not stop the batch, they are reported as
failures.

Each entry gets the position of its event in the original event list as id. The id is unique
within the call and is used to find the original event if the queue reports the entry as
failed. Ids are not renumbered when events are dropped.
"""

import logging
from collections.abc import Sequence
from typing import Any

from attrs import define, field

from webhook_trigger.abc.exceptions import ValidationError
from webhook_trigger.event import Event, decode, encode
from webhook_trigger.outcome import Failure

logger = logging.getLogger("BatchAssembler")


@define(frozen=True)
class BatchEntry:
    """One serialized message of a batch."""

    id: str = field()
    body: str = field()
    client_code: str = field()

    def to_request_entry(self, attribute_name: str) -> dict:
        """Returns the entry in the shape of a SQS batch request entry."""
        return {
            "Id": self.id,
            "MessageBody": self.body,
            "MessageAttributes": {
                attribute_name: {"DataType": "String", "StringValue": self.client_code}
            },
        }

    def original_message(self) -> dict:
        """Recovers the original message from the serialized body and the client code."""
        return {**decode(self.body), "clientCode": self.client_code}


Batch = list[BatchEntry]


@define(kw_only=True)
class AssembledBatches:
    """Batches ready to send and failures of events that did not pass validation."""

    batches: list[Batch] = field(factory=list)
    failures: list[Failure] = field(factory=list)

    @property
    def entry_count(self) -> int:
        """number of entries over all batches"""
        return sum(map(len, self.batches))


def _as_original_message(raw_event: Any) -> Any:
    if isinstance(raw_event, Event):
        return raw_event.as_dict()
    return raw_event


class BatchAssembler:
    """Builds batches of at most :code:`max_batch_size` entries from raw events."""

    def __init__(self, service_name: str, max_batch_size: int) -> None:
        if max_batch_size <= 0:
            raise ValueError("max_batch_size must be > 0")
        self._service_name = service_name
        self._max_batch_size = max_batch_size

    def assemble(self, events: Sequence[Any]) -> AssembledBatches:
        """Validates the events and partitions the valid ones into batches in input order.

        Parameters
        ----------
        events : Sequence
            :code:`Event` instances or mappings with the keys :code:`clientCode`,
            :code:`entity`, :code:`eventName` and :code:`content`.

        Returns
        -------
        AssembledBatches
            The sealed batches and one failure per invalid event.
        """
        assembled = AssembledBatches()
        current_batch: Batch = []
        for index, raw_event in enumerate(events):
            try:
                entry = self._build_entry(str(index), raw_event)
            except ValidationError as error:
                logger.debug("Event %s dropped from batch: %s", index, error.message)
                assembled.failures.append(Failure(_as_original_message(raw_event), error.message))
                continue
            current_batch.append(entry)
            if len(current_batch) == self._max_batch_size:
                assembled.batches.append(current_batch)
                current_batch = []
        if current_batch:
            assembled.batches.append(current_batch)
        return assembled

    def _build_entry(self, entry_id: str, raw_event: Any) -> BatchEntry:
        event = Event.from_dict(raw_event)
        payload = event.to_payload(self._service_name)
        return BatchEntry(id=entry_id, body=encode(payload), client_code=event.client_code)
