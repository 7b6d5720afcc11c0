"""Node models: the per-call overrides and the stored node."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .execution import ExecutionTrace


class TraceOverrides(BaseModel):
    """Explicit node fields a caller may force for one call."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str | None = None
    label: str | None = None
    parent: str | None = None
    parallel: bool | str | None = None
    narratives: list[str] | None = None
    # recorded in place of the real call values, which the caller still gets
    inputs: Any = None
    outputs: Any = None


class NodeData(ExecutionTrace):
    """A trace node.

    The same model is handed to instrumented functions as their trailing
    trace-context argument, before any execution field is filled.
    """

    id: str
    label: str | None = None
    parent: str | None = None
    parallel: bool | str | None = None
    abstract: bool = False
    # extraction transforms may store any shape here
    inputs: Any = None
    errors: Any = None
    create_time: datetime | None = None
    update_time: datetime | None = None


class EngineNode(BaseModel):
    """Node element of an exported trace."""

    data: NodeData
    group: Literal["nodes"] = "nodes"
