"""ExecutionEngine: a TraceableEngine with an identity and a user context."""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from ..models import Trace, TraceConfig
from .engine import TraceableEngine


class ExecutionEngine(TraceableEngine):
    """Engine carrying an execution id, an execution date and a context dict."""

    def __init__(
        self,
        execution_id: str | None = None,
        execution_date: datetime | None = None,
        initial_trace: Trace | None = None,
        default_config: TraceConfig | None = None,
    ) -> None:
        super().__init__(initial_trace=initial_trace, default_config=default_config)
        self.execution_date = execution_date or datetime.now(UTC)
        self.execution_id = execution_id or default_execution_id(self.execution_date)
        self._context: dict[str, Any] = {}

    def get_options(self) -> dict[str, Any]:
        return {"execution_date": self.execution_date, "execution_id": self.execution_id}

    def set_context(self, value: dict[str, Any]) -> ExecutionEngine:
        self._context = copy.deepcopy(value)
        return self

    def get_context(self) -> dict[str, Any]:
        return self._context

    def update_context(self, partial_context: dict[str, Any]) -> ExecutionEngine:
        self._context = {**self._context, **partial_context}
        return self

    def update_context_attribute(self, key: str, value: Any) -> ExecutionEngine:
        """Merge dict values into the existing attribute; replace anything else."""
        current = self._context.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            self._context[key] = {**current, **value}
        else:
            self._context[key] = value
        return self


def default_execution_id(execution_date: datetime) -> str:
    stamp = execution_date.strftime("%Y%m%d_%H%M%S") + f"{execution_date.microsecond // 1000:03d}"
    return f"exec_{stamp}_{uuid4()}"
