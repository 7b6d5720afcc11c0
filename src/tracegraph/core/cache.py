"""Time-to-live caching of function results."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from ..models import FunctionMetadata
from .execution import execute
from .hashing import generate_hash_id
from .metadata import extract_function_metadata, is_async

logger = logging.getLogger(__name__)

KeyFactory = Callable[[FunctionMetadata, list[object]], str]
TtlFactory = Callable[[FunctionMetadata, list[object]], float]
BypassPredicate = Callable[[FunctionMetadata, list[object]], bool]


@runtime_checkable
class CacheStore(Protocol):
    """Key/value store with per-entry TTL in milliseconds.

    ``get`` returns ``None`` for a missing or expired key.
    """

    def get(self, key: str) -> Any: ...
    def set(self, key: str, value: Any, ttl: float | None = None) -> Any: ...


class MapCacheStore:
    """In-memory store.

    Expired entries are dropped when read and swept on every write, so keys
    that are never asked for again do not outlive their TTL for long.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[Any, float | None]] = {}

    def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> Any:
        now = self._clock()
        self.purge_expired(now)
        self._entries[key] = (value, now + ttl / 1000.0 if ttl is not None else None)
        return value

    def purge_expired(self, now: float | None = None) -> int:
        """Drop every expired entry and return how many were dropped."""
        now = self._clock() if now is None else now
        expired = [
            key for key, (_, expires_at) in self._entries.items() if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        self.purge_expired()
        return len(self._entries)


class CacheContext(BaseModel):
    """What a cache lookup found, passed to ``on_cache_event``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    metadata: FunctionMetadata
    inputs: list[Any] = Field(default_factory=list)
    cache_key: str
    ttl: float | None = None
    is_bypassed: bool = False
    # a hit only counts as served from cache when is_bypassed is False
    is_cached: bool = False
    value: Any = None


def execute_cache(
    func: Callable[..., Any],
    inputs: Sequence[object] = (),
    *,
    store: CacheStore,
    ttl: float | TtlFactory | None = None,
    bypass: BypassPredicate | None = None,
    cache_key: KeyFactory | None = None,
    on_cache_event: Callable[[CacheContext], object] | None = None,
    metadata: FunctionMetadata | None = None,
) -> Any:
    """Return the cached result for ``inputs`` or compute and store it.

    Errors propagate and are never cached. ``None`` results are not cached
    since ``None`` marks a miss.
    """
    call_inputs = list(inputs)
    metadata = metadata or extract_function_metadata(func)
    key = cache_key(metadata, call_inputs) if cache_key is not None else generate_hash_id(*call_inputs)
    is_bypassed = bypass is not None and bool(bypass(metadata, call_inputs))
    entry_ttl = ttl(metadata, call_inputs) if callable(ttl) else ttl
    cached = store.get(key)

    if on_cache_event is not None:
        on_cache_event(
            CacheContext(
                metadata=metadata,
                inputs=call_inputs,
                cache_key=key,
                ttl=entry_ttl,
                is_bypassed=is_bypassed,
                is_cached=cached is not None,
                value=cached,
            )
        )

    if cached is not None and not is_bypassed:
        logger.debug("Cache hit for %s (%s)", metadata.name, key)
        return _resolved(cached) if is_async(func) else cached

    logger.debug("Cache miss for %s (%s)", metadata.name, key)

    def remember(result: Any) -> Any:
        if result is not None:
            store.set(key, result, entry_ttl)
        return result

    return execute(func, call_inputs, on_success=remember)


async def _resolved(value: Any) -> Any:
    return value
