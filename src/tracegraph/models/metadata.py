"""Function metadata model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FunctionMetadata(BaseModel):
    """Static facts about a callable, used to derive ids, labels and cache keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    parameters: list[str] = Field(default_factory=list)
    is_async: bool = False
    is_bound: bool = False
    class_name: str | None = None
    method: str | None = None
