"""Short-lived memoization of concurrent identical calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..models import FunctionMetadata
from .cache import MapCacheStore
from .execution import execute
from .hashing import generate_hash_id
from .metadata import extract_function_metadata, is_async

logger = logging.getLogger(__name__)

MEMOIZATION_DEFAULT_EXPIRATION_MS = 100
MEMOIZATION_MAX_EXPIRATION_MS = 1000


class MemoizationContext(BaseModel):
    """What a memo lookup found, passed to ``on_memoize_event``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    metadata: FunctionMetadata
    inputs_hash: str
    is_memoized: bool = False
    value: Any = None


def execute_memoize(
    func: Callable[..., Any],
    inputs: Sequence[object] = (),
    *,
    store: MapCacheStore,
    expiration_ms: float | None = None,
    on_memoize_event: Callable[[MemoizationContext], object] | None = None,
    metadata: FunctionMetadata | None = None,
) -> Any:
    """Reuse the result of an identical call made within ``expiration_ms``.

    The expiration defaults to 100 ms and is capped at 1000 ms. Coroutine
    functions are scheduled once as a future that every concurrent caller
    awaits; the expiration starts when that future settles.
    """
    expiration = min(
        expiration_ms if expiration_ms is not None else MEMOIZATION_DEFAULT_EXPIRATION_MS,
        MEMOIZATION_MAX_EXPIRATION_MS,
    )
    call_inputs = list(inputs)
    inputs_hash = generate_hash_id(*call_inputs)
    memoized = store.get(inputs_hash)

    if on_memoize_event is not None:
        on_memoize_event(
            MemoizationContext(
                metadata=metadata or extract_function_metadata(func),
                inputs_hash=inputs_hash,
                is_memoized=memoized is not None,
                value=memoized,
            )
        )

    if memoized is not None:
        logger.debug("Memoized result reused for %s", inputs_hash)
        return memoized

    if is_async(func):
        future = asyncio.ensure_future(func(*call_inputs))
        store.set(inputs_hash, future)
        future.add_done_callback(lambda done: _expire_later(store, inputs_hash, done, expiration))
        return future

    result = execute(func, call_inputs)
    if result is not None:
        store.set(inputs_hash, result, expiration)
    return result


def _expire_later(store: MapCacheStore, key: str, done: asyncio.Future[Any], expiration: float) -> None:
    store.set(key, done, expiration)
    done.get_loop().call_later(expiration / 1000.0, store.purge_expired)
