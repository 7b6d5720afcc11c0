"""Decorators for tracing, engine binding, caching and memoization."""

from __future__ import annotations

import functools
import inspect
import weakref
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar, cast

from ..exceptions import EngineNotBoundError
from ..models import ErrorPolicy, ExecutionTrace, FunctionMetadata
from .cache import BypassPredicate, CacheContext, CacheStore, KeyFactory, MapCacheStore, TtlFactory, execute_cache
from .engine import RunOptions
from .execution import execution_trace
from .execution_engine import ExecutionEngine
from .hashing import generate_hash_id
from .memoize import MemoizationContext, execute_memoize
from .metadata import extract_function_metadata, is_async
from .registry import EngineRegistry

P = ParamSpec("P")
R = TypeVar("R")
C = TypeVar("C", bound=type)

StoreFactory = Callable[[Any], CacheStore]


class TraceContext(ExecutionTrace):
    """Execution trace of one decorated call plus what was called."""

    metadata: FunctionMetadata


class EngineTask:
    """Base for classes decorated with ``@engine``; declares the bound engine."""

    engine: ExecutionEngine


def trace(
    on_trace_event: Callable[[TraceContext], object] | None = None,
    *,
    errors: ErrorPolicy = "throw",
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Time every call of the decorated function and report it.

    The wrapped function returns its own result. Under ``errors="catch"`` a
    failing call returns ``None`` after the handler has seen the failure.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        metadata = extract_function_metadata(func)

        def handler(execution: ExecutionTrace) -> None:
            if on_trace_event is not None:
                on_trace_event(TraceContext(metadata=metadata, **dict(execution)))

        if is_async(func):

            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
                target = functools.partial(func, **kwargs) if kwargs else func
                result = await cast(Any, execution_trace(target, list(args), handler, errors=errors))
                return result.outputs

            return cast(Callable[P, R], async_wrapper)

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            target = functools.partial(func, **kwargs) if kwargs else func
            result = execution_trace(target, list(args), handler, errors=errors)
            if inspect.isawaitable(result):
                return cast(R, _outputs_of(result))
            return cast(ExecutionTrace, result).outputs

        return wrapper

    return decorator


def engine(registry: EngineRegistry, id: str | None = None) -> Callable[[C], C]:
    """Give every instance of the decorated class ``self.engine``.

    Instances of classes decorated with the same ``registry`` and ``id`` share
    one engine. Without ``id`` each instance gets its own.
    """

    def decorator(cls: C) -> C:
        original_init = cls.__init__

        @functools.wraps(original_init)
        def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
            self.engine = registry.get_or_create(id)
            original_init(self, *args, **kwargs)

        cls.__init__ = __init__  # type: ignore[misc]
        return cls

    return decorator


def run(options: RunOptions = None) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """Route a method through ``self.engine.run`` and return its outputs.

    The method receives its trace node as a trailing argument when its
    signature has room for one.
    """

    def decorator(func: Callable[..., R]) -> Callable[..., R]:
        def _submit(self: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
            bound_engine = getattr(self, "engine", None)
            if bound_engine is None:
                raise EngineNotBoundError(
                    f"{type(self).__name__}.{func.__name__} needs an engine, decorate "
                    f"{type(self).__name__} with @engine(...)"
                )
            return bound_engine.run(functools.partial(func, self, **kwargs), list(args), options)

        if is_async(func):

            @functools.wraps(func)
            async def async_wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                result = await _submit(self, args, kwargs)
                return result.outputs

            return cast(Callable[..., R], async_wrapper)

        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            result = _submit(self, args, kwargs)
            if inspect.isawaitable(result):
                return _outputs_of(result)
            return result.outputs

        return wrapper

    return decorator


def cache(
    ttl: float | TtlFactory | None = None,
    *,
    store: CacheStore | StoreFactory | None = None,
    bypass: BypassPredicate | None = None,
    cache_key: KeyFactory | None = None,
    on_cache_event: Callable[[CacheContext], object] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Cache results of the decorated function for ``ttl`` milliseconds.

    ``store`` is a ``CacheStore`` or a factory called with the instance (or
    ``None`` for plain functions). Without one, each instance gets its own
    ``MapCacheStore``.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        metadata = extract_function_metadata(func)
        stores = _StorePerOwner(store)

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            call = _Call.of(func, metadata, args, kwargs)
            key_factory = cache_key
            if key_factory is None and call.keywords:
                keywords = call.keywords
                key_factory = lambda _metadata, inputs: generate_hash_id(*inputs, keywords)  # noqa: E731
            return execute_cache(
                call.target,
                call.inputs,
                store=stores.for_owner(call.owner),
                ttl=ttl,
                bypass=bypass,
                cache_key=key_factory,
                on_cache_event=on_cache_event,
                metadata=call.metadata,
            )

        return wrapper

    return decorator


def memoize(
    expiration_ms: float | None = None,
    *,
    on_memoize_event: Callable[[MemoizationContext], object] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Share results of identical calls made within ``expiration_ms``."""

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        metadata = extract_function_metadata(func)
        stores = _StorePerOwner(None)

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            call = _Call.of(func, metadata, args, kwargs)
            return execute_memoize(
                call.target,
                call.inputs,
                store=cast(MapCacheStore, stores.for_owner(call.owner, call.keywords)),
                expiration_ms=expiration_ms,
                on_memoize_event=on_memoize_event,
                metadata=call.metadata,
            )

        return wrapper

    return decorator


class _Call:
    """One decorated call split into owner, positional inputs and keywords."""

    def __init__(
        self,
        target: Callable[..., Any],
        inputs: list[Any],
        keywords: dict[str, Any],
        owner: Any,
        metadata: FunctionMetadata,
    ) -> None:
        self.target = target
        self.inputs = inputs
        self.keywords = keywords
        self.owner = owner
        self.metadata = metadata

    @classmethod
    def of(
        cls,
        func: Callable[..., Any],
        metadata: FunctionMetadata,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> _Call:
        positional, keywords = _bind_args(func, args, kwargs)
        owner = None
        if metadata.parameters[:1] == ["self"] and positional:
            owner, positional = positional[0], positional[1:]
            metadata = metadata.model_copy(
                update={"is_bound": True, "class_name": type(owner).__name__}
            )
            target: Callable[..., Any] = functools.partial(func, owner, **keywords)
        else:
            target = functools.partial(func, **keywords) if keywords else func
        return cls(target, list(positional), keywords, owner, metadata)


class _StorePerOwner:
    """Resolves the store for a call: one per instance, one for plain calls."""

    def __init__(self, store: CacheStore | StoreFactory | None) -> None:
        self._store = store
        self._shared: dict[str, CacheStore] = {}
        self._by_owner: weakref.WeakKeyDictionary[Any, dict[str, CacheStore]] = weakref.WeakKeyDictionary()

    def for_owner(self, owner: Any, keywords: dict[str, Any] | None = None) -> CacheStore:
        if isinstance(self._store, CacheStore):
            return self._store
        slot = generate_hash_id(keywords) if keywords else ""
        stores = self._shared
        if owner is not None:
            try:
                stores = self._by_owner.setdefault(owner, {})
            except TypeError:
                stores = self._shared
        if slot not in stores:
            stores[slot] = self._store(owner) if self._store is not None else MapCacheStore()
        return stores[slot]


def _bind_args(
    func: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """Normalise a call to positional arguments plus keyword-only ones."""
    if not kwargs:
        return args, {}
    try:
        bound = inspect.signature(func).bind(*args, **kwargs)
    except (TypeError, ValueError):
        return args, dict(kwargs)
    return bound.args, dict(bound.kwargs)


async def _outputs_of(pending: Any) -> Any:
    result = await pending
    return result.outputs
