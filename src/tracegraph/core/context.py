"""Propagation of the current parent node id across nested calls."""

from __future__ import annotations

import contextvars
from collections.abc import Callable
from typing import ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")

_current_parent: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "tracegraph_current_parent",
    default=None,
)


def get_current_parent() -> str | None:
    return _current_parent.get()


def push_current_parent(node_id: str | None) -> contextvars.Token[str | None]:
    return _current_parent.set(node_id)


def reset_current_parent(token: contextvars.Token[str | None]) -> None:
    _current_parent.reset(token)


def clear_context() -> None:
    _current_parent.set(None)


def propagate_context(func: Callable[P, R]) -> Callable[P, R]:
    """Copy contextvars to a callable for thread execution."""
    copied_context = contextvars.copy_context()

    def wrapped(*args: P.args, **kwargs: P.kwargs) -> R:
        return copied_context.run(func, *args, **kwargs)

    return wrapped
