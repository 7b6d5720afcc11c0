from __future__ import annotations

import json
from pathlib import Path

import pytest

from tracegraph import TraceableEngine, TracegraphLoadError
from tracegraph.models import EngineEdge, EngineNode, Trace
from tracegraph.serializers import load_trace_json, save_trace_json, trace_from_json, trace_to_json


def _build_trace() -> Trace:
    engine = TraceableEngine()

    def plan(goal: str) -> list[str]:
        return [f"research {goal}", f"write {goal}"]

    def act(steps: list[str]) -> int:
        return len(steps)

    steps = engine.run(plan, ["report"]).outputs
    engine.run(act, [steps])
    engine.push_narratives(engine.get_trace_nodes()[0].data.id, "planned two steps")
    return engine.get_trace()


def test_trace_to_json_uses_camel_case_and_drops_empty_fields() -> None:
    payload = json.loads(trace_to_json(_build_trace()))

    assert [element["group"] for element in payload] == ["nodes", "nodes", "edges"]
    node = payload[0]["data"]
    assert node["label"] == "1 - plan"
    assert node["narratives"] == ["planned two steps"]
    assert "createTime" in node and "elapsedTime" in node
    assert "updateTime" not in node
    assert "errors" not in node
    assert node["startTime"].endswith("+00:00")
    assert payload[2]["data"]["source"] == node["id"]


def test_trace_to_and_from_json_roundtrip() -> None:
    trace = _build_trace()
    loaded = trace_from_json(trace_to_json(trace))

    assert [type(element) for element in loaded] == [EngineNode, EngineNode, EngineEdge]
    assert loaded[0].data.id == trace[0].data.id
    assert loaded[0].data.start_time == trace[0].data.start_time
    assert loaded[1].data.outputs == 2


def test_non_serializable_values_are_marked() -> None:
    engine = TraceableEngine()
    engine.run(lambda: object())

    with pytest.warns(UserWarning, match="not JSON serializable"):
        payload = json.loads(trace_to_json(engine.get_trace()))

    assert payload[0]["data"]["outputs"].endswith("[NON-SERIALIZABLE]")


def test_save_and_load_trace_json_file(tmp_path: Path) -> None:
    trace = _build_trace()
    output = save_trace_json(trace, tmp_path / "nested" / "trace.json")

    assert output.exists()
    assert [element.group for element in load_trace_json(output)] == ["nodes", "nodes", "edges"]


def test_invalid_payload_raises_load_error() -> None:
    with pytest.raises(TracegraphLoadError):
        trace_from_json("not json")
    with pytest.raises(TracegraphLoadError):
        trace_from_json('[{"group": "vertices", "data": {}}]')


def test_missing_file_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_trace_json(tmp_path / "missing.json")
