from __future__ import annotations

import pytest

from tracegraph import EngineRegistry, TraceableEngine
from tracegraph.core import clear_context


@pytest.fixture(autouse=True)
def _reset_context() -> None:
    """Start every test outside of any traced call."""
    clear_context()


@pytest.fixture
def engine() -> TraceableEngine:
    return TraceableEngine()


@pytest.fixture
def registry() -> EngineRegistry:
    return EngineRegistry()
