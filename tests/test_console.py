from __future__ import annotations

from tracegraph import TraceableEngine
from tracegraph.models import NodeData
from tracegraph.renderers import render_trace


def _build_engine() -> TraceableEngine:
    engine = TraceableEngine()

    def research(topic: str) -> str:
        return f"notes on {topic}"

    def fail(reason: str) -> None:
        raise RuntimeError(reason)

    def orchestrate(topic: str, node: NodeData | None = None) -> str:
        engine.push_narratives(node.id, "starting research")
        notes = engine.run(research, [topic]).outputs
        engine.run(fail, ["rate limited"], {"config": {"errors": "catch"}})
        return notes

    engine.run(orchestrate, ["tracing"])
    return engine


def test_render_nests_children_under_parent() -> None:
    output = render_trace(_build_engine().get_trace())

    assert "Trace (3 nodes, 1 edges)" in output
    assert "1 - orchestrate" in output
    assert "1 - research" in output
    assert '[→ 3 - fail]' in output
    assert 'narrative: "starting research"' in output
    assert "error: RuntimeError: rate limited" in output
    assert output.index("1 - orchestrate") < output.index("1 - research")


def test_minimal_verbosity_hides_details() -> None:
    output = render_trace(_build_engine().get_trace(), verbosity="minimal")

    assert "narrative:" not in output
    assert "error:" not in output


def test_full_verbosity_shows_inputs_and_outputs() -> None:
    output = render_trace(_build_engine().get_trace(), verbosity="full")

    assert 'inputs: ["tracing"]' in output
    assert 'outputs: "notes on tracing"' in output
