"""Per-call trace options."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .execution import ExecutionExtractor
from .node import TraceOverrides

ErrorPolicy = Literal["throw", "catch"]
TraceExecution = bool | list[str] | ExecutionExtractor


class TraceConfig(BaseModel):
    """How much of a call to record, and what to do when it fails."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    trace_execution: TraceExecution = True
    parallel: bool | str = False
    errors: ErrorPolicy = "throw"


DEFAULT_TRACE_CONFIG = TraceConfig()


class TraceOptions(BaseModel):
    """Options accepted by ``TraceableEngine.run``."""

    model_config = ConfigDict(extra="forbid")

    trace: TraceOverrides = Field(default_factory=TraceOverrides)
    config: TraceConfig | None = None
