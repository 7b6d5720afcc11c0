"""Engine, execution wrapper, graph builder and their collaborators."""

from .cache import CacheContext, CacheStore, MapCacheStore, execute_cache
from .context import clear_context, get_current_parent, propagate_context
from .decorators import EngineTask, TraceContext, run, trace
from .engine import TraceableEngine
from .execution import execute, execution_trace
from .execution_engine import ExecutionEngine
from .extraction import extract_field, extract_narratives, extract_node_fields
from .graph import TraceGraphBuilder
from .hashing import generate_hash_id
from .json_query import extract, query_by_path
from .memoize import (
    MEMOIZATION_DEFAULT_EXPIRATION_MS,
    MEMOIZATION_MAX_EXPIRATION_MS,
    MemoizationContext,
    execute_memoize,
)
from .metadata import extract_function_metadata
from .registry import EngineRegistry
from .safe_error import safe_error
from .timer import ExecutionTimer, format_elapsed

__all__ = [
    "MEMOIZATION_DEFAULT_EXPIRATION_MS",
    "MEMOIZATION_MAX_EXPIRATION_MS",
    "CacheContext",
    "CacheStore",
    "EngineRegistry",
    "EngineTask",
    "ExecutionEngine",
    "ExecutionTimer",
    "MapCacheStore",
    "MemoizationContext",
    "TraceContext",
    "TraceGraphBuilder",
    "TraceableEngine",
    "clear_context",
    "execute",
    "execute_cache",
    "execute_memoize",
    "execution_trace",
    "extract",
    "extract_field",
    "extract_function_metadata",
    "extract_narratives",
    "extract_node_fields",
    "format_elapsed",
    "generate_hash_id",
    "get_current_parent",
    "propagate_context",
    "query_by_path",
    "run",
    "safe_error",
    "trace",
]
