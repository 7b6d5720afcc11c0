"""Example 2: Parallel weather lookup.

A weather report that fans out two fetches via asyncio.gather() under an
implicit parent, then writes the trace to JSON.

Validates: contextvars carry the parent into tasks, parallel siblings get no
edges between them, the exported file loads back.
"""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

from tracegraph import EngineEdge, TraceableEngine
from tracegraph.serializers import load_trace_json, save_trace_json

engine = TraceableEngine()


async def fetch_current_temperature(city: str) -> str:
    await asyncio.sleep(0.01)
    return f"Current Temperature in {city}: 25°C"


async def fetch_daily_forecast(city: str) -> str:
    await asyncio.sleep(0)
    return f"Daily Forecast in {city}: Sunny"


async def get_weather_information(city: str) -> str:
    parallel = {"config": {"parallel": True}}
    temperature, forecast = await asyncio.gather(
        engine.run(fetch_current_temperature, [city], parallel),
        engine.run(fetch_daily_forecast, [city], parallel),
    )
    return f"Weather information: {temperature.outputs}, {forecast.outputs}"


async def main() -> None:
    result = await engine.run(get_weather_information, ["Paris"])
    trace = engine.get_trace()
    weather, *fetches = engine.get_trace_nodes()

    # -- Assertions --
    assert result.outputs.startswith("Weather information: Current Temperature in Paris")
    assert len(fetches) == 2
    assert all(node.data.parent == weather.data.id for node in fetches)
    assert not [element for element in trace if isinstance(element, EngineEdge)]

    with tempfile.TemporaryDirectory() as directory:
        path = save_trace_json(trace, Path(directory) / "weather.json")
        assert len(load_trace_json(path)) == len(trace)

    print("Example 2 PASSED: Parallel weather lookup")


if __name__ == "__main__":
    asyncio.run(main())
