"""TraceableEngine: runs functions and records them in a trace graph."""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Awaitable, Callable, Coroutine, Sequence
from typing import Any, get_args
from uuid import uuid4

from ..exceptions import CircularTraceError
from ..models import (
    DEFAULT_TRACE_CONFIG,
    TRACE_ADAPTER,
    EngineNode,
    ExecutionTrace,
    NodeData,
    Trace,
    TraceConfig,
    TraceOptions,
    TraceOverrides,
)
from .context import get_current_parent, push_current_parent, reset_current_parent
from .execution import execution_trace
from .graph import TraceGraphBuilder
from .metadata import function_name, is_async

logger = logging.getLogger(__name__)

RunOptions = TraceOptions | TraceOverrides | dict[str, Any] | None

_UNNAMED = "function"
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class TraceableEngine:
    """Traces function calls into one growing graph of nodes and edges.

    Nested calls pick up the running call as their parent through
    ``contextvars``, so naturally written call trees, sync or async, produce
    correctly parented graphs without threading ids by hand.

    Error-handling contract
    -----------------------
    - Passing an engine as an input raises ``CircularTraceError`` before the
      call runs.
    - A failing function is always recorded on its node; the exception is
      re-raised under ``errors="throw"`` (default) or returned inside the
      ``ExecutionTrace`` under ``errors="catch"``.
    - A failing extractor raises ``ExtractionError``.
    """

    def __init__(
        self,
        initial_trace: Trace | None = None,
        default_config: TraceConfig | None = None,
    ) -> None:
        self.default_config = default_config or DEFAULT_TRACE_CONFIG
        self._graph = TraceGraphBuilder()
        self.init_trace(initial_trace)

    def init_trace(self, initial_trace: Trace | Sequence[dict[str, Any]] | None) -> TraceableEngine:
        """Replace the graph with ``initial_trace`` and drop queued narratives."""
        elements = TRACE_ADAPTER.validate_python(list(initial_trace or []))
        self._graph.reset(elements)
        return self

    def get_trace(self) -> Trace:
        return [*self._graph.nodes, *self._graph.edges]

    def get_trace_nodes(self) -> list[EngineNode]:
        return list(self._graph.nodes)

    def get_narratives(self) -> list[str]:
        return [
            narrative
            for node in self._graph.nodes
            for narrative in (node.data.narratives or [])
            if narrative
        ]

    def push_narratives(self, node_id: str, narratives: str | list[str]) -> TraceableEngine:
        """Append narratives to a node, or queue them until the node exists."""
        self._graph.push_narratives(node_id, narratives)
        return self

    def run(
        self,
        func: Callable[..., Any],
        inputs: Sequence[object] | None = None,
        options: RunOptions = None,
    ) -> ExecutionTrace | Coroutine[Any, Any, ExecutionTrace]:
        """Execute ``func(*inputs)`` and record it as a node.

        Coroutine functions return a coroutine to await. ``func`` receives
        its node as an extra trailing argument when its signature has room
        for one.
        """
        call_inputs = list(inputs or [])
        name = function_name(func, default=_UNNAMED)
        if any(isinstance(value, TraceableEngine) for value in call_inputs):
            raise CircularTraceError(
                f"{name} could not have an instance of TraceableEngine as input, "
                "this will create circular dependency on trace"
            )

        overrides, config = self._resolve_options(options)
        if overrides.parallel is not None:
            config = config.model_copy(update={"parallel": overrides.parallel})

        node = NodeData(
            id=overrides.id or f"{name}_{int(time.time() * 1000)}_{uuid4()}",
            label=overrides.label or f"{len(self._graph.nodes) + 1} - {overrides.id or name}",
            parent=overrides.parent or get_current_parent(),
            parallel=config.parallel,
            narratives=list(overrides.narratives) if overrides.narratives is not None else None,
        )
        logger.debug("Running %s as node %s (parent=%s)", name, node.id, node.parent)

        replaced = overrides.model_dump(include={"inputs", "outputs"}, exclude_none=True)

        def place(execution: ExecutionTrace) -> None:
            if replaced:
                execution = execution.model_copy(update=replaced)
            self._graph.place(node, execution, config)

        trailing = (node,) if _accepts_trailing_argument(func, len(call_inputs)) else ()
        return execution_trace(
            _within_parent(func, node.id),
            call_inputs,
            place,
            errors=config.errors,
            extra_inputs=trailing,
        )

    def _resolve_options(self, options: RunOptions) -> tuple[TraceOverrides, TraceConfig]:
        if options is None:
            return TraceOverrides(), self.default_config
        if isinstance(options, TraceOptions):
            return options.trace, options.config or self.default_config
        if isinstance(options, TraceOverrides):
            return options, self.default_config
        if isinstance(options, dict):
            if "trace" in options or "config" in options:
                return self._resolve_options(TraceOptions.model_validate(options))
            return TraceOverrides.model_validate(options), self.default_config
        raise TypeError(f"Unsupported trace options: {options!r}")


def _accepts_trailing_argument(func: Callable[..., Any], input_count: int) -> bool:
    """Whether ``func`` takes the node right after its inputs.

    The receiving parameter must either be required or be annotated with
    ``NodeData``; an ordinary optional parameter keeps its default.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    positional = [param for param in signature.parameters.values() if param.kind in _POSITIONAL]
    if len(positional) <= input_count:
        return False
    receiver = positional[input_count]
    if receiver.default is not inspect.Parameter.empty and not _is_node_annotation(receiver.annotation):
        return False
    try:
        signature.bind(*([None] * (input_count + 1)))
    except TypeError:
        return False
    return True


def _is_node_annotation(annotation: object) -> bool:
    # postponed annotations arrive as strings
    if isinstance(annotation, str):
        return "NodeData" in annotation
    return annotation is NodeData or NodeData in get_args(annotation)


def _within_parent(func: Callable[..., Any], node_id: str) -> Callable[..., Any]:
    """Wrap ``func`` so nested traced calls see ``node_id`` as their parent."""
    if is_async(func):

        async def run_async(*args: object) -> Any:
            token = push_current_parent(node_id)
            try:
                return await func(*args)
            finally:
                reset_current_parent(token)

        return run_async

    def run_sync(*args: object) -> Any:
        token = push_current_parent(node_id)
        try:
            result = func(*args)
        finally:
            reset_current_parent(token)
        if inspect.isawaitable(result):
            return _await_within_parent(result, node_id)
        return result

    return run_sync


async def _await_within_parent(awaitable: Awaitable[Any], node_id: str) -> Any:
    token = push_current_parent(node_id)
    try:
        return await awaitable
    finally:
        reset_current_parent(token)
