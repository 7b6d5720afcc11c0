from __future__ import annotations

import re
from datetime import UTC, datetime

from tracegraph import EngineRegistry, ExecutionEngine, TraceConfig


def test_default_execution_id_is_derived_from_date() -> None:
    engine = ExecutionEngine(execution_date=datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=UTC))

    assert re.match(r"^exec_20240305_140709123_[0-9a-f-]{36}$", engine.execution_id)
    assert engine.get_options() == {
        "execution_date": engine.execution_date,
        "execution_id": engine.execution_id,
    }


def test_explicit_execution_id_and_default_config() -> None:
    engine = ExecutionEngine(execution_id="exec_custom", default_config=TraceConfig(parallel=True))

    engine.run(lambda: "ok")

    assert engine.execution_id == "exec_custom"
    assert engine.get_trace_nodes()[0].data.parallel is True


def test_set_context_stores_a_copy() -> None:
    engine = ExecutionEngine()
    context = {"user": {"name": "Ada"}}

    engine.set_context(context)
    context["user"]["name"] = "changed"

    assert engine.get_context() == {"user": {"name": "Ada"}}


def test_update_context_and_attributes() -> None:
    engine = ExecutionEngine().set_context({"user": {"name": "Ada"}, "attempt": 1})

    engine.update_context({"attempt": 2}).update_context_attribute("user", {"role": "admin"})
    engine.update_context_attribute("attempt", 3)

    assert engine.get_context() == {"user": {"name": "Ada", "role": "admin"}, "attempt": 3}


def test_registry_reuses_engines_by_id(registry: EngineRegistry) -> None:
    first = registry.get_or_create("weather")
    second = registry.get_or_create("weather")

    assert first is second
    assert first.execution_id == "weather"
    assert "weather" in registry
    assert registry.get("weather") is first
    assert registry.get("unknown") is None


def test_registry_without_id_creates_fresh_engines(registry: EngineRegistry) -> None:
    first = registry.get_or_create()
    second = registry.get_or_create()

    assert first is not second
    assert len(registry) == 2
    assert registry.ids() == [first.execution_id, second.execution_id]
    assert registry.get(first.execution_id) is first
