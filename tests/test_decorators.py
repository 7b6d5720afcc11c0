from __future__ import annotations

import asyncio

import pytest

from tracegraph import (
    EngineEdge,
    EngineNotBoundError,
    EngineRegistry,
    EngineTask,
    NodeData,
    TraceContext,
    engine,
    run,
    trace,
)


def test_trace_decorator_reports_sync_calls() -> None:
    events: list[TraceContext] = []

    @trace(events.append)
    def add(a: int, b: int) -> int:
        return a + b

    assert add(1, 2) == 3
    assert add.__name__ == "add"
    assert events[0].inputs == [1, 2]
    assert events[0].outputs == 3
    assert events[0].metadata.name == "add"
    assert events[0].duration is not None


def test_trace_decorator_keyword_arguments_reach_the_function() -> None:
    events: list[TraceContext] = []

    @trace(events.append)
    def greet(name: str, *, punctuation: str = ".") -> str:
        return f"Hello {name}{punctuation}"

    assert greet("Ada", punctuation="!") == "Hello Ada!"
    assert events[0].inputs == ["Ada"]


def test_trace_decorator_catch_returns_none() -> None:
    events: list[TraceContext] = []

    @trace(events.append, errors="catch")
    def fail() -> None:
        raise ValueError("boom")

    assert fail() is None
    assert events[0].errors == [{"name": "ValueError", "code": None, "message": "boom"}]


def test_trace_decorator_throw_reports_then_raises() -> None:
    events: list[TraceContext] = []

    @trace(events.append)
    def fail() -> None:
        raise ValueError("boom")

    with pytest.raises(ValueError):
        fail()
    assert len(events) == 1


@pytest.mark.asyncio
async def test_trace_decorator_async_method() -> None:
    events: list[TraceContext] = []

    class Greeter:
        @trace(events.append)
        async def greet(self, name: str) -> str:
            await asyncio.sleep(0)
            return f"Hello {name}"

    assert await Greeter().greet("Ada") == "Hello Ada"
    assert events[0].metadata.class_name == "Greeter"
    assert events[0].metadata.is_async is True
    assert events[0].outputs == "Hello Ada"


@pytest.mark.asyncio
async def test_engine_and_run_decorators_trace_parallel_weather(registry: EngineRegistry) -> None:
    @engine(registry, id="weather")
    class WeatherService(EngineTask):
        def __init__(self, unit: str) -> None:
            self.unit = unit

        @run({"config": {"parallel": True}})
        async def fetch_temperature(self, city: str) -> str:
            return f"25{self.unit} in {city}"

        @run({"config": {"parallel": True}})
        async def fetch_forecast(self, city: str) -> str:
            return f"Sunny in {city}"

        @run()
        async def get_weather(self, city: str) -> str:
            temperature, forecast = await asyncio.gather(self.fetch_temperature(city), self.fetch_forecast(city))
            return f"{temperature}, {forecast}"

    service = WeatherService("°C")

    assert await service.get_weather("Paris") == "25°C in Paris, Sunny in Paris"
    assert service.engine is registry.get("weather")
    assert WeatherService("°F").engine is service.engine

    weather, *fetches = service.engine.get_trace_nodes()
    assert weather.data.id.startswith("get_weather_")
    assert {node.data.parent for node in fetches} == {weather.data.id}
    assert all(node.data.parallel is True for node in fetches)
    assert not [element for element in service.engine.get_trace() if isinstance(element, EngineEdge)]


def test_run_decorator_passes_trace_node_and_keywords(registry: EngineRegistry) -> None:
    @engine(registry)
    class Steps(EngineTask):
        @run({"label": "first step"})
        def first(self, value: int, node: NodeData | None = None) -> str | None:
            return node.id if node is not None else None

        @run()
        def second(self, value: int, *, factor: int = 1) -> int:
            return value * factor

    steps = Steps()

    assert steps.first(1).startswith("first_")
    assert steps.second(2, factor=3) == 6
    nodes = steps.engine.get_trace_nodes()
    assert nodes[0].data.label == "first step"
    assert nodes[1].data.inputs == [2]


def test_run_decorator_requires_an_engine() -> None:
    class Unbound(EngineTask):
        @run()
        def step(self) -> str:
            return "never"

    with pytest.raises(EngineNotBoundError):
        Unbound().step()


@pytest.mark.asyncio
async def test_async_run_decorator_requires_an_engine() -> None:
    class Unbound(EngineTask):
        @run()
        async def step(self) -> str:
            return "never"

    with pytest.raises(EngineNotBoundError):
        await Unbound().step()
