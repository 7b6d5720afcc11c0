"""Edge models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EdgeData(BaseModel):
    """Inferred dependency between two calls sharing a parent scope."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    source: str
    target: str
    parent: str | None = None
    parallel: bool | str | None = None

    @classmethod
    def between(
        cls,
        source: str,
        target: str,
        *,
        parent: str | None,
        parallel: bool | str | None,
    ) -> EdgeData:
        return cls(
            id=f"{source}->{target}",
            source=source,
            target=target,
            parent=parent,
            parallel=parallel,
        )


class EngineEdge(BaseModel):
    """Edge element of an exported trace."""

    data: EdgeData
    group: Literal["edges"] = "edges"
