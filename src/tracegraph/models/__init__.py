"""Data models for execution traces."""

from .edge import EdgeData, EngineEdge
from .execution import (
    EXECUTION_FIELDS,
    ExecutionExtractor,
    ExecutionTrace,
    Extractor,
    Omit,
    PathList,
    Transform,
    Verbatim,
    as_extractor,
)
from .metadata import FunctionMetadata
from .node import EngineNode, NodeData, TraceOverrides
from .options import DEFAULT_TRACE_CONFIG, ErrorPolicy, TraceConfig, TraceOptions
from .trace import TRACE_ADAPTER, Trace, TraceElement, split_trace

__all__ = [
    "DEFAULT_TRACE_CONFIG",
    "EXECUTION_FIELDS",
    "EdgeData",
    "EngineEdge",
    "EngineNode",
    "ErrorPolicy",
    "ExecutionExtractor",
    "ExecutionTrace",
    "Extractor",
    "FunctionMetadata",
    "NodeData",
    "Omit",
    "PathList",
    "TRACE_ADAPTER",
    "Trace",
    "TraceConfig",
    "TraceElement",
    "TraceOptions",
    "TraceOverrides",
    "Transform",
    "Verbatim",
    "as_extractor",
    "split_trace",
]
