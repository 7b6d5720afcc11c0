"""Example 3: Declarative tasks.

A car rental quote built from decorated methods: the class is bound to a
named engine, every method call becomes a node, pricing is cached and the
availability check is memoized.

Validates: @engine / @run bind methods to a shared engine, the trailing
trace node reaches the method, @cache skips repeated work.
"""

from __future__ import annotations

import asyncio

from tracegraph import EngineRegistry, EngineTask, NodeData, cache, engine, memoize, run, trace

registry = EngineRegistry()
pricing_calls: list[str] = []


@trace(lambda context: print(f"[trace] {context.metadata.name} took {context.elapsed_time}"))
def daily_rate(model: str) -> int:
    return {"compact": 40, "suv": 75}.get(model, 55)


@engine(registry, id="car-rental")
class RentalDesk(EngineTask):
    @memoize(expiration_ms=500)
    async def is_available(self, model: str) -> bool:
        await asyncio.sleep(0.01)
        return model != "convertible"

    @cache(ttl=60_000)
    def price(self, model: str, days: int) -> int:
        pricing_calls.append(model)
        return daily_rate(model) * days

    @run({"config": {"parallel": "checks"}})
    async def check(self, model: str) -> bool:
        return await self.is_available(model)

    @run()
    async def quote(self, model: str, days: int, node: NodeData | None = None) -> dict[str, object]:
        available = await self.check(model)
        self.engine.push_narratives(node.id, f"{model} available: {available}")
        return {"model": model, "days": days, "total": self.price(model, days) if available else None}


async def main() -> None:
    desk = RentalDesk()
    first = await desk.quote("suv", 3)
    second = await desk.quote("suv", 3)

    # -- Assertions --
    assert first == second == {"model": "suv", "days": 3, "total": 225}
    assert pricing_calls == ["suv"]
    assert RentalDesk().engine is desk.engine
    assert desk.engine.get_narratives() == ["suv available: True", "suv available: True"]

    print(f"Example 3 PASSED: Declarative tasks ({len(desk.engine.get_trace_nodes())} nodes)")


if __name__ == "__main__":
    asyncio.run(main())
