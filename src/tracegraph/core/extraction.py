"""Decide which execution facts are kept on a node."""

from __future__ import annotations

from typing import Any

from pydantic.alias_generators import to_snake

from ..exceptions import ExtractionError
from ..models import (
    EXECUTION_FIELDS,
    ExecutionExtractor,
    ExecutionTrace,
    Extractor,
    NodeData,
    Omit,
    PathList,
    Transform,
    Verbatim,
)
from ..models.options import TraceExecution
from .json_query import extract


def describe_extractor(extractor: Extractor) -> str:
    match extractor:
        case Omit():
            return "false"
        case Verbatim():
            return "true"
        case PathList(paths=paths):
            return ", ".join(paths)
        case Transform(func=func):
            return getattr(func, "__qualname__", repr(func))
    return repr(extractor)


def extract_field(value: Any, extractor: Extractor) -> Any:
    """Apply one field extractor to the raw value of ``inputs``/``outputs``/``errors``."""
    try:
        match extractor:
            case Omit():
                return None
            case Verbatim():
                return value
            case PathList(paths=paths):
                return extract(value, paths)
            case Transform(func=func):
                return func(value)
    except Exception as exc:
        raise ExtractionError(
            f'error when mapping/extracting ExecutionTrace with config: "{describe_extractor(extractor)}", {exc}'
        ) from exc
    raise TypeError(f"Unsupported extractor: {extractor!r}")


def extract_narratives(node: NodeData, extractor: Extractor, narratives: list[str]) -> list[str] | None:
    """Append what ``extractor`` contributes to the already collected narratives."""
    try:
        match extractor:
            case Omit():
                return None
            case Verbatim():
                return list(narratives)
            case PathList(paths=extra):
                return [*narratives, *extra]
            case Transform(func=func):
                produced = func(node)
                if produced is None:
                    return list(narratives)
                if isinstance(produced, str):
                    return [*narratives, produced]
                return [*narratives, *(str(item) for item in produced)]
    except Exception as exc:
        raise ExtractionError(
            f'error when mapping/extracting Narrative with config: "{describe_extractor(extractor)}", {exc}'
        ) from exc
    raise TypeError(f"Unsupported extractor: {extractor!r}")


def extract_node_fields(
    node: NodeData,
    execution: ExecutionTrace,
    trace_execution: TraceExecution,
    queued_narratives: list[str] | None = None,
) -> dict[str, Any]:
    """Compute the execution fields stored on ``node``.

    Narratives are always ordered as queued ones, then the node's own seed
    narratives, then whatever the extractor adds. Keys present in the result
    overwrite the stored node on merge; absent keys leave it untouched.
    """
    collected = [*(queued_narratives or []), *(node.narratives or [])]
    raw = {name: getattr(execution, name) for name in EXECUTION_FIELDS if name != "narratives"}

    match trace_execution:
        case False:
            return {}
        case True:
            return {**raw, "narratives": collected}
        case list():
            allowed = {to_snake(name) for name in trace_execution}
            fields = {name: value for name, value in raw.items() if name in allowed}
            if "narratives" in allowed:
                fields["narratives"] = collected
            return fields
        case ExecutionExtractor():
            view = node.model_copy(update=raw)
            fields = {
                "inputs": extract_field(execution.inputs, trace_execution.inputs),
                "outputs": extract_field(execution.outputs, trace_execution.outputs),
                "errors": extract_field(execution.errors, trace_execution.errors),
                "narratives": extract_narratives(view, trace_execution.narratives, collected),
            }
            if trace_execution.start_time:
                fields["start_time"] = execution.start_time
            if trace_execution.end_time:
                fields["end_time"] = execution.end_time
            if trace_execution.start_time and trace_execution.end_time:
                fields["duration"] = execution.duration
                fields["elapsed_time"] = execution.elapsed_time
            return fields
    raise TypeError(f"Unsupported trace_execution value: {trace_execution!r}")
