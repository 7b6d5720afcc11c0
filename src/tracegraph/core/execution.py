"""Run sync or async callables behind one success/failure contract."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Coroutine, Sequence
from typing import Any

from ..models import ErrorPolicy, ExecutionTrace
from .metadata import is_async
from .safe_error import safe_error
from .timer import ExecutionTimer

TraceHandler = Callable[[ExecutionTrace], object]


def execute(
    func: Callable[..., Any],
    inputs: Sequence[object] = (),
    extra_inputs: Sequence[object] = (),
    on_success: Callable[[Any], Any] | None = None,
    on_error: Callable[[Exception], Any] | None = None,
) -> Any:
    """Call ``func(*inputs, *extra_inputs)`` and route the outcome.

    Coroutine functions, and plain functions that return an awaitable, give
    back a coroutine that settles through the same callbacks. Without
    ``on_error`` the exception propagates unchanged.
    """
    args = (*inputs, *extra_inputs)
    if is_async(func):
        return _execute_async(func, args, on_success, on_error)

    try:
        result = func(*args)
    except Exception as exc:
        if on_error is None:
            raise
        return on_error(exc)

    if inspect.isawaitable(result):
        return _settle(result, on_success, on_error)
    return on_success(result) if on_success is not None else result


async def _execute_async(
    func: Callable[..., Awaitable[Any]],
    args: tuple[object, ...],
    on_success: Callable[[Any], Any] | None,
    on_error: Callable[[Exception], Any] | None,
) -> Any:
    try:
        awaitable = func(*args)
    except Exception as exc:
        if on_error is None:
            raise
        return on_error(exc)
    return await _settle(awaitable, on_success, on_error)


async def _settle(
    awaitable: Awaitable[Any],
    on_success: Callable[[Any], Any] | None,
    on_error: Callable[[Exception], Any] | None,
) -> Any:
    try:
        output = await awaitable
    except Exception as exc:
        if on_error is None:
            raise
        return on_error(exc)
    return on_success(output) if on_success is not None else output


def execution_trace(
    func: Callable[..., Any],
    inputs: Sequence[object] | None = None,
    trace_handler: TraceHandler | None = None,
    *,
    errors: ErrorPolicy = "throw",
    extra_inputs: Sequence[object] = (),
) -> ExecutionTrace | Coroutine[Any, Any, ExecutionTrace]:
    """Time ``func`` and describe its outcome as an ``ExecutionTrace``.

    ``trace_handler`` sees the record before it is returned, and before the
    original exception is re-raised under the ``"throw"`` policy, so a record
    exists for failed calls too. Under ``"catch"`` the failure record is the
    result.
    """
    recorded_inputs = list(inputs or [])
    timer = ExecutionTimer()
    timer.start()

    def _timing() -> dict[str, Any]:
        timer.stop()
        return {
            "start_time": timer.get_start_date(),
            "end_time": timer.get_end_date(),
            "duration": timer.get_duration(),
            "elapsed_time": timer.get_elapsed_time(),
        }

    def on_success(outputs: Any) -> ExecutionTrace:
        trace = ExecutionTrace(inputs=recorded_inputs, outputs=outputs, **_timing())
        if trace_handler is not None:
            trace_handler(trace)
        return trace

    def on_error(error: Exception) -> ExecutionTrace:
        trace = ExecutionTrace(inputs=recorded_inputs, errors=[safe_error(error)], **_timing())
        if trace_handler is not None:
            trace_handler(trace)
        if errors == "catch":
            return trace
        raise error

    return execute(func, recorded_inputs, extra_inputs, on_success, on_error)
