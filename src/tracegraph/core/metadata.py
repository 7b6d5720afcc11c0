"""Introspection of callables: name, parameters and async-ness."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any

from ..models import FunctionMetadata

ANONYMOUS_NAME = "anonymous"


def is_async(func: Callable[..., Any]) -> bool:
    """True when calling ``func`` returns a coroutine by declaration."""
    while isinstance(func, functools.partial):
        func = func.func
    return inspect.iscoroutinefunction(func)


def function_name(func: Callable[..., Any], default: str = ANONYMOUS_NAME) -> str:
    while isinstance(func, functools.partial):
        func = func.func
    name = getattr(func, "__name__", None)
    if not name or name == "<lambda>":
        return default
    return name


def extract_function_metadata(func: Callable[..., Any]) -> FunctionMetadata:
    target = func
    while isinstance(target, functools.partial):
        target = target.func

    is_bound = inspect.ismethod(target)
    class_name: str | None = None
    method: str | None = None
    if is_bound:
        owner = target.__self__
        class_name = owner.__name__ if isinstance(owner, type) else type(owner).__name__
        method = target.__name__
    else:
        qualname = getattr(target, "__qualname__", "")
        head, _, tail = qualname.rpartition(".")
        if head and not head.endswith("<locals>"):
            class_name = head.rsplit(".", 1)[-1]
            method = tail

    try:
        parameters = list(inspect.signature(func).parameters)
    except (TypeError, ValueError):
        parameters = []

    return FunctionMetadata(
        name=function_name(func),
        parameters=parameters,
        is_async=is_async(func),
        is_bound=is_bound,
        class_name=class_name,
        method=method,
    )
