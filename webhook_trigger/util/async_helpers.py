"""A collection of helper utilitites for async code"""

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable
from typing import Generic, TypeVar

from attrs import define, field

from webhook_trigger.abc.exceptions import InvalidConfigurationError

logger = logging.getLogger("BoundedConcurrencyRunner")

Input = TypeVar("Input")
Output = TypeVar("Output")

AsyncWorker = Callable[[Input], Awaitable[Output]]


@define(frozen=True)
class TaskResult(Generic[Output]):
    """The result of one work item. Holds either the value returned by the worker or the
    exception it raised."""

    value: Output | None = field(default=None)
    error: Exception | None = field(default=None)

    @property
    def failed(self) -> bool:
        """Whether the worker raised for this item"""
        return self.error is not None

    def unwrap(self) -> Output:
        """Returns the value or raises the captured exception.

        Raises
        ------
        Exception
            The exception the worker raised for this item.
        """
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


class BoundedConcurrencyRunner(Generic[Input, Output]):
    """
    Drains a list of work items through an async worker, keeping at most
    :code:`max_concurrency` worker calls in flight.

    As soon as any in-flight call completes its slot is refilled with the next pending item
    (sliding window). Results are returned in submission order, independent of completion
    order. A failing worker call does not stop the run: its exception is stored as failed
    :code:`TaskResult` at the index of the item and all other items are still processed.

    Parameters
    ----------
    worker : Callable[[Input], Awaitable[Output]]
        Coroutine function called once per item.
    max_concurrency : int
        Maximum number of simultaneous worker calls. Must be > 0.
    timeout_s : float | None, optional
        Timeout in seconds for a single worker call, by default None (no timeout).
        A timed out call is cancelled and frees its slot. Blocking work the worker handed
        to a thread is not stopped by this, so such workers enforce their own timeout.

    Raises
    ------
    InvalidConfigurationError
        If :code:`max_concurrency` is not a positive integer.
    """

    def __init__(
        self,
        worker: AsyncWorker[Input, Output],
        max_concurrency: int,
        timeout_s: float | None = None,
    ) -> None:
        if (
            not isinstance(max_concurrency, int)
            or isinstance(max_concurrency, bool)
            or max_concurrency <= 0
        ):
            raise InvalidConfigurationError(
                f"max_concurrency must be a positive integer, got {max_concurrency!r}"
            )
        self._worker = worker
        self.max_concurrency = max_concurrency
        self._timeout_s = timeout_s
        self.active_tasks = 0

    async def run(self, items: Iterable[Input]) -> list[TaskResult[Output]]:
        """Processes all items and returns one :code:`TaskResult` per item in the order of
        :code:`items`.

        If the run itself is cancelled all in-flight worker calls are cancelled as well.
        """
        pending: deque[tuple[int, Input]] = deque(enumerate(items))
        results: list[TaskResult[Output] | None] = [None] * len(pending)
        in_flight: dict[asyncio.Task[TaskResult[Output]], int] = {}
        try:
            while pending or in_flight:
                free_slots = min(self.max_concurrency - len(in_flight), len(pending))
                for _ in range(free_slots):
                    index, item = pending.popleft()
                    task = asyncio.create_task(self._process(item), name=f"work-item-{index}")
                    in_flight[task] = index
                self.active_tasks = len(in_flight)
                done, _ = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    results[in_flight.pop(task)] = task.result()
                self.active_tasks = len(in_flight)
        finally:
            for task in in_flight:
                task.cancel()
            self.active_tasks = 0
        return results  # type: ignore[return-value]

    async def _process(self, item: Input) -> TaskResult[Output]:
        try:
            if self._timeout_s is None:
                value = await self._worker(item)
            else:
                value = await asyncio.wait_for(self._worker(item), self._timeout_s)
        except Exception as error:  # pylint: disable=broad-except
            logger.debug("Work item failed: %s", error)
            return TaskResult(error=error)
        return TaskResult(value=value)
