from __future__ import annotations

import asyncio

import pytest

from tracegraph import MapCacheStore, MemoizationContext, execute_memoize, memoize
from tracegraph.core.memoize import MEMOIZATION_DEFAULT_EXPIRATION_MS


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_execute_memoize_reuses_recent_result() -> None:
    clock = FakeClock()
    store = MapCacheStore(clock=clock)
    calls: list[int] = []
    events: list[MemoizationContext] = []

    def compute(value: int) -> int:
        calls.append(value)
        return value * 2

    assert execute_memoize(compute, [2], store=store, on_memoize_event=events.append) == 4
    assert execute_memoize(compute, [2], store=store, on_memoize_event=events.append) == 4
    clock.now = MEMOIZATION_DEFAULT_EXPIRATION_MS / 1000 + 0.01
    assert execute_memoize(compute, [2], store=store) == 4

    assert calls == [2, 2]
    assert [event.is_memoized for event in events] == [False, True]
    assert events[0].metadata.name == "compute"


def test_execute_memoize_caps_expiration() -> None:
    clock = FakeClock()
    store = MapCacheStore(clock=clock)
    calls: list[int] = []

    def compute(value: int) -> int:
        calls.append(value)
        return value

    execute_memoize(compute, [1], store=store, expiration_ms=60_000)
    clock.now = 1.5
    execute_memoize(compute, [1], store=store, expiration_ms=60_000)

    assert calls == [1, 1]


def test_memoize_decorator_sync() -> None:
    calls: list[str] = []

    @memoize(expiration_ms=1000)
    def greet(name: str) -> str:
        calls.append(name)
        return f"Hello {name}"

    assert greet("Ada") == greet("Ada") == "Hello Ada"
    assert greet("Bob") == "Hello Bob"
    assert calls == ["Ada", "Bob"]


@pytest.mark.asyncio
async def test_memoize_decorator_shares_in_flight_call() -> None:
    calls: list[int] = []

    @memoize()
    async def slow_double(value: int) -> int:
        calls.append(value)
        await asyncio.sleep(0.01)
        return value * 2

    results = await asyncio.gather(slow_double(2), slow_double(2), slow_double(3))

    assert results == [4, 4, 6]
    assert calls == [2, 3]


@pytest.mark.asyncio
async def test_memoize_decorator_per_instance() -> None:
    class Counter:
        def __init__(self) -> None:
            self.calls = 0

        @memoize(expiration_ms=500)
        async def bump(self) -> int:
            self.calls += 1
            return self.calls

    first, second = Counter(), Counter()

    assert await asyncio.gather(first.bump(), first.bump(), second.bump()) == [1, 1, 1]
    assert first.calls == 1 and second.calls == 1


def test_execute_memoize_does_not_retain_expired_results() -> None:
    clock = FakeClock()
    store = MapCacheStore(clock=clock)

    for value in range(500):
        execute_memoize(lambda number: number, [value], store=store, expiration_ms=1)
    clock.now = 0.05

    assert len(store) == 0


@pytest.mark.asyncio
async def test_execute_memoize_evicts_settled_async_results() -> None:
    store = MapCacheStore()

    async def double(value: int) -> int:
        return value * 2

    results = await asyncio.gather(
        *(execute_memoize(double, [value], store=store, expiration_ms=1) for value in range(50))
    )
    await asyncio.sleep(0.05)

    assert results == [value * 2 for value in range(50)]
    assert store.purge_expired() == 0
    assert len(store) == 0
