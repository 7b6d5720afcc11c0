"""Explicit registry of named execution engines."""

from __future__ import annotations

from .execution_engine import ExecutionEngine


class EngineRegistry:
    """Maps caller-chosen ids to engines, creating them on first use.

    Classes decorated with the same registry and id share one engine and so
    one trace graph.
    """

    def __init__(self) -> None:
        self._engines: dict[str, ExecutionEngine] = {}

    def get_or_create(self, engine_id: str | None = None) -> ExecutionEngine:
        """Return the engine registered under ``engine_id``.

        ``None`` always creates a fresh engine, registered under its
        generated execution id.
        """
        if engine_id is not None and engine_id in self._engines:
            return self._engines[engine_id]
        engine = ExecutionEngine(execution_id=engine_id)
        self._engines[engine.execution_id] = engine
        return engine

    def get(self, engine_id: str) -> ExecutionEngine | None:
        return self._engines.get(engine_id)

    def ids(self) -> list[str]:
        return list(self._engines)

    def __contains__(self, engine_id: object) -> bool:
        return engine_id in self._engines

    def __len__(self) -> int:
        return len(self._engines)
