"""Trace container type: all nodes followed by all edges."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, TypeAdapter

from .edge import EngineEdge
from .node import EngineNode

TraceElement = Annotated[EngineNode | EngineEdge, Field(discriminator="group")]
Trace = list[EngineNode | EngineEdge]

TRACE_ADAPTER: TypeAdapter[list[EngineNode | EngineEdge]] = TypeAdapter(list[TraceElement])


def split_trace(trace: Trace) -> tuple[list[EngineNode], list[EngineEdge]]:
    nodes = [element for element in trace if isinstance(element, EngineNode)]
    edges = [element for element in trace if isinstance(element, EngineEdge)]
    return nodes, edges
