"""Tests for the bounded-concurrency task launcher."""

import asyncio

import pytest

from core.scanner.pool import run_bounded


class _Gate:
    """Instrumented tasks that block until the gate opens."""

    def __init__(self, fail_on: set[int] | None = None):
        self.event = asyncio.Event()
        self.in_flight = 0
        self.max_in_flight = 0
        self.started = 0
        self.fail_on = fail_on or set()

    def factory(self, index: int):
        async def _task():
            self.started += 1
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            try:
                await self.event.wait()
                if index in self.fail_on:
                    raise RuntimeError(f"task {index} failed")
                return index
            finally:
                self.in_flight -= 1

        return _task


async def _settle() -> None:
    for _ in range(20):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_never_more_than_limit_in_flight() -> None:
    gate = _Gate(fail_on={3})
    factories = [gate.factory(i) for i in range(25)]

    sweep = asyncio.create_task(run_bounded(factories, limit=10))
    await _settle()

    assert gate.started == 10
    assert gate.in_flight == 10

    gate.event.set()
    results = await sweep

    assert gate.max_in_flight == 10
    assert gate.started == 25
    assert sorted(results) == [i for i in range(25) if i != 3]


@pytest.mark.asyncio
async def test_failing_task_does_not_block_siblings() -> None:
    async def ok(value):
        await asyncio.sleep(0)
        return value

    async def boom():
        raise ValueError("bad payload")

    factories = [lambda: ok(1), boom, lambda: ok(2), boom, lambda: ok(3)]

    results = await run_bounded(factories, limit=2)

    assert sorted(results) == [1, 2, 3]


@pytest.mark.asyncio
async def test_none_results_are_dropped() -> None:
    async def maybe(value):
        return value if value % 2 else None

    results = await run_bounded([lambda v=v: maybe(v) for v in range(6)], limit=3)

    assert sorted(results) == [1, 3, 5]


@pytest.mark.asyncio
async def test_empty_input() -> None:
    assert await run_bounded([], limit=10) == []


@pytest.mark.asyncio
async def test_rejects_invalid_limit() -> None:
    with pytest.raises(ValueError, match="limit must be >= 1"):
        await run_bounded([], limit=0)
