"""Execution records and extractors."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EXECUTION_FIELDS = (
    "inputs",
    "outputs",
    "errors",
    "narratives",
    "start_time",
    "end_time",
    "duration",
    "elapsed_time",
)


class ExecutionTrace(BaseModel):
    """What one call did: its inputs, its outcome, and how long it took."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    inputs: list[Any] = Field(default_factory=list)
    outputs: Any = None
    errors: list[Any] | None = None
    narratives: list[str] | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration: float | None = None
    elapsed_time: str | None = None


@dataclass(frozen=True)
class Omit:
    """Do not keep the field."""


@dataclass(frozen=True)
class Verbatim:
    """Keep the field as produced by the call."""


@dataclass(frozen=True)
class PathList:
    """Keep only the given paths.

    For ``narratives`` the strings are not paths: they are appended as-is.
    """

    paths: tuple[str, ...]


@dataclass(frozen=True)
class Transform:
    """Store whatever ``func`` returns for the raw value."""

    func: Callable[[Any], Any]


Extractor = Omit | Verbatim | PathList | Transform


def as_extractor(value: object) -> Extractor:
    """Coerce the user-facing ``bool | list[str] | callable`` form to a variant."""
    if isinstance(value, (Omit, Verbatim, PathList, Transform)):
        return value
    if value is None or value is False:
        return Omit()
    if value is True:
        return Verbatim()
    if isinstance(value, str):
        return PathList(paths=(value,))
    if isinstance(value, (list, tuple)):
        return PathList(paths=tuple(str(item) for item in value))
    if callable(value):
        return Transform(func=value)
    raise TypeError(f"Unsupported extractor: {value!r}")


class ExecutionExtractor(BaseModel):
    """Per-field extractors for ``TraceConfig.trace_execution``."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="forbid",
    )

    inputs: Extractor = Omit()
    outputs: Extractor = Omit()
    errors: Extractor = Omit()
    narratives: Extractor = Omit()
    start_time: bool = False
    end_time: bool = False

    @field_validator("inputs", "outputs", "errors", "narratives", mode="before")
    @classmethod
    def _coerce_extractor(cls, value: object) -> Extractor:
        return as_extractor(value)
