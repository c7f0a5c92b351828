# pylint: disable=missing-docstring
# pylint: disable=protected-access
import asyncio
import random

import pytest

from webhook_trigger.abc.exceptions import InvalidConfigurationError
from webhook_trigger.util.async_helpers import BoundedConcurrencyRunner, TaskResult


class ConcurrencyProbe:
    """worker recording how many calls are active at the same time"""

    def __init__(self, delay_s: float = 0.01):
        self.delay_s = delay_s
        self.active = 0
        self.max_active = 0
        self.calls = []

    async def __call__(self, item):
        self.calls.append(item)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay_s)
        finally:
            self.active -= 1
        return item * 2


class TestTaskResult:
    def test_unwrap_returns_value(self):
        assert TaskResult(value=3).unwrap() == 3

    def test_unwrap_raises_error(self):
        result = TaskResult(error=ValueError("broken"))
        assert result.failed
        with pytest.raises(ValueError, match="broken"):
            result.unwrap()

    def test_none_value_is_not_a_failure(self):
        assert not TaskResult(value=None).failed


class TestBoundedConcurrencyRunner:
    @pytest.mark.parametrize("max_concurrency", [0, -1, 1.5, "10", None, True])
    def test_rejects_invalid_max_concurrency(self, max_concurrency):
        async def worker(item):
            return item

        with pytest.raises(InvalidConfigurationError, match="max_concurrency"):
            BoundedConcurrencyRunner(worker, max_concurrency)

    @pytest.mark.asyncio
    async def test_empty_input_does_not_call_worker(self):
        probe = ConcurrencyProbe()
        runner = BoundedConcurrencyRunner(probe, 5)
        assert await runner.run([]) == []
        assert not probe.calls

    @pytest.mark.asyncio
    async def test_results_follow_input_order_not_completion_order(self):
        delays = [0.05, 0.01, 0.03, 0.0, 0.02, 0.04]

        async def worker(index):
            await asyncio.sleep(delays[index])
            return f"item-{index}"

        runner = BoundedConcurrencyRunner(worker, 3)
        results = await runner.run(range(len(delays)))
        assert [result.unwrap() for result in results] == [
            f"item-{index}" for index in range(len(delays))
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "max_concurrency, item_count",
        [(1, 5), (3, 10), (25, 100), (10, 4), (4, 4)],
    )
    async def test_concurrency_never_exceeds_limit(self, max_concurrency, item_count):
        probe = ConcurrencyProbe()
        runner = BoundedConcurrencyRunner(probe, max_concurrency)
        results = await runner.run(list(range(item_count)))
        assert len(results) == item_count
        assert probe.max_active == min(max_concurrency, item_count)
        assert [result.value for result in results] == [item * 2 for item in range(item_count)]

    @pytest.mark.asyncio
    async def test_concurrency_with_random_durations(self):
        durations = [random.uniform(0, 0.01) for _ in range(50)]
        active = 0
        max_active = 0

        async def worker(duration):
            nonlocal active, max_active
            active += 1
            max_active = max(max_active, active)
            await asyncio.sleep(duration)
            active -= 1
            return duration

        runner = BoundedConcurrencyRunner(worker, 7)
        results = await runner.run(durations)
        assert max_active <= 7
        assert [result.value for result in results] == durations

    @pytest.mark.asyncio
    async def test_refills_free_slot_before_slow_item_completes(self):
        slow_item_released = asyncio.Event()
        started = []

        async def worker(item):
            started.append(item)
            if item == 0:
                await slow_item_released.wait()
            if item == 3:
                slow_item_released.set()
            return item

        runner = BoundedConcurrencyRunner(worker, 2)
        results = await asyncio.wait_for(runner.run([0, 1, 2, 3]), timeout=1)
        assert started == [0, 1, 2, 3]
        assert [result.value for result in results] == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_failing_item_does_not_abort_others(self):
        async def worker(item):
            await asyncio.sleep(0)
            if item == 1:
                raise ValueError("item 1 is broken")
            return item

        runner = BoundedConcurrencyRunner(worker, 2)
        results = await runner.run([0, 1, 2, 3])
        assert len(results) == 4
        assert results[1].failed
        assert isinstance(results[1].error, ValueError)
        assert [result.value for index, result in enumerate(results) if index != 1] == [0, 2, 3]

    @pytest.mark.asyncio
    async def test_timed_out_item_is_a_failure(self):
        async def worker(item):
            if item == "slow":
                await asyncio.sleep(1)
            return item

        runner = BoundedConcurrencyRunner(worker, 2, timeout_s=0.01)
        results = await runner.run(["fast", "slow", "fast"])
        assert results[0].value == "fast"
        assert isinstance(results[1].error, TimeoutError)
        assert results[2].value == "fast"

    @pytest.mark.asyncio
    async def test_active_tasks_is_reset_after_run(self):
        probe = ConcurrencyProbe()
        runner = BoundedConcurrencyRunner(probe, 3)
        await runner.run(range(6))
        assert runner.active_tasks == 0

    @pytest.mark.asyncio
    async def test_cancelling_run_cancels_in_flight_items(self):
        cancelled = []

        async def worker(item):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(item)
                raise
            return item

        runner = BoundedConcurrencyRunner(worker, 2)
        run_task = asyncio.create_task(runner.run([0, 1, 2]))
        await asyncio.sleep(0.01)
        run_task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await run_task
        await asyncio.sleep(0)
        assert sorted(cancelled) == [0, 1]

    @pytest.mark.asyncio
    async def test_does_not_modify_input(self):
        items = [1, 2, 3]
        runner = BoundedConcurrencyRunner(ConcurrencyProbe(delay_s=0), 2)
        await runner.run(items)
        assert items == [1, 2, 3]
