"""tracegraph: in-process execution tracing into a node/edge graph.

Engine API:
    engine = tracegraph.TraceableEngine()
    engine.run(fetch, ["Paris"])           -> ExecutionTrace (or a coroutine)
    engine.get_trace()                     -> [EngineNode..., EngineEdge...]

Declarative API:
    registry = tracegraph.EngineRegistry()

    @tracegraph.engine(registry, id="weather")
    class Weather(tracegraph.EngineTask):
        @tracegraph.run()
        async def fetch(self, city): ...
"""

from __future__ import annotations

from .core import (
    CacheContext,
    CacheStore,
    EngineRegistry,
    EngineTask,
    ExecutionEngine,
    MapCacheStore,
    MemoizationContext,
    TraceableEngine,
    TraceContext,
    execute_cache,
    execute_memoize,
    execution_trace,
    extract_function_metadata,
    generate_hash_id,
    run,
    trace,
)
from .core.decorators import cache, engine, memoize
from .exceptions import (
    CircularTraceError,
    EngineNotBoundError,
    ExtractionError,
    TracegraphError,
    TracegraphLoadError,
)
from .models import (
    DEFAULT_TRACE_CONFIG,
    EdgeData,
    EngineEdge,
    EngineNode,
    ExecutionExtractor,
    ExecutionTrace,
    FunctionMetadata,
    NodeData,
    Trace,
    TraceConfig,
    TraceOptions,
    TraceOverrides,
)
from .serializers import load_trace_json, save_trace_json, trace_from_json, trace_to_json

__all__ = [
    "DEFAULT_TRACE_CONFIG",
    "CacheContext",
    "CacheStore",
    "CircularTraceError",
    "EdgeData",
    "EngineEdge",
    "EngineNode",
    "EngineNotBoundError",
    "EngineRegistry",
    "EngineTask",
    "ExecutionEngine",
    "ExecutionExtractor",
    "ExecutionTrace",
    "ExtractionError",
    "FunctionMetadata",
    "MapCacheStore",
    "MemoizationContext",
    "NodeData",
    "Trace",
    "TraceConfig",
    "TraceContext",
    "TraceOptions",
    "TraceOverrides",
    "TraceableEngine",
    "TracegraphError",
    "TracegraphLoadError",
    "cache",
    "engine",
    "execute_cache",
    "execute_memoize",
    "execution_trace",
    "extract_function_metadata",
    "generate_hash_id",
    "load_trace_json",
    "memoize",
    "run",
    "save_trace_json",
    "trace",
    "trace_from_json",
    "trace_to_json",
]
