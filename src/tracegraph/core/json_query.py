"""Path queries into nested dicts, lists and objects.

Paths are dotted, with numeric segments indexing lists and bracket
selectors filtering by a key, e.g. ``outputs.others[key=Y].value`` or
``outputs.others.2.key``. Whitespace around segments is ignored.
"""

from __future__ import annotations

import re
from typing import Any, Literal

SearchMode = Literal["ALL", "FIRST"]

_SELECTOR = re.compile(r"^\[\s*(?P<key>[^=\]]*?)\s*=\s*(?P<value>[^\]]*?)\s*\]$")


def query_by_path(
    obj: Any,
    path: str,
    *,
    search_in_array_elements: SearchMode | None = None,
) -> Any:
    """Resolve ``path`` against ``obj``; ``None`` when it does not resolve.

    With ``search_in_array_elements`` a top-level list is searched element by
    element: ``"FIRST"`` returns the first element's match, ``"ALL"`` every
    non-empty match.
    """
    if isinstance(obj, list) and search_in_array_elements is not None:
        if search_in_array_elements == "ALL":
            return [match for item in obj if (match := query_by_path(item, path))]
        for item in obj:
            match = query_by_path(item, path)
            if match:
                return match
        return None

    current = obj
    for segment in path.replace("[", ".[").split("."):
        accessor = segment.strip()
        if not accessor:
            continue
        if current is None:
            return None
        current = _step(current, accessor, search_in_array_elements)
    return current


def extract(obj: Any, paths: list[str] | tuple[str, ...]) -> list[dict[str, Any]]:
    """Return one ``{path: value}`` record per path, ``{}`` for unresolved paths.

    >>> extract({"inputs": {"number": 3}}, ["inputs.number", "missing"])
    [{'inputs.number': 3}, {}]
    """
    records: list[dict[str, Any]] = []
    for path in paths:
        value = query_by_path(obj, path)
        records.append({path: value} if value is not None else {})
    return records


def _step(current: Any, accessor: str, mode: SearchMode | None) -> Any:
    selector = _SELECTOR.match(accessor)
    if selector is not None:
        key, expected = selector.group("key"), selector.group("value")
        if isinstance(current, list):
            if mode == "ALL":
                return [item for item in current if _matches(item, key, expected)]
            return next((item for item in current if _matches(item, key, expected)), None)
        return current if _matches(current, key, expected) else None

    if isinstance(current, list):
        if accessor.isdigit():
            return _get(current, accessor)
        if mode == "ALL":
            return [_get(item, accessor) for item in current]
        return next((value for item in current if (value := _get(item, accessor))), None)
    return _get(current, accessor)


def _matches(item: Any, key: str, expected: str) -> bool:
    candidate = _get(item, key)
    return candidate is not None and str(candidate) == expected


def _get(container: Any, key: str) -> Any:
    if isinstance(container, dict):
        return container.get(key)
    if isinstance(container, (list, tuple)):
        if not key.isdigit():
            return None
        index = int(key)
        return container[index] if index < len(container) else None
    if isinstance(container, (str, bytes, int, float, bool)):
        return None
    return getattr(container, key, None)
