"""JSON serialization helpers for traces."""

from __future__ import annotations

import json
import warnings
from datetime import date, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..exceptions import TracegraphLoadError
from ..models import TRACE_ADAPTER, Trace

NON_SERIALIZABLE_MARKER = "[NON-SERIALIZABLE]"


def trace_to_json(trace: Trace, *, indent: int | None = 2) -> str:
    """Encode a trace with camelCase keys, ``None`` fields left out.

    Values that JSON cannot hold are written as their ``repr`` followed by
    ``[NON-SERIALIZABLE]`` and reported with a warning.
    """
    payload = TRACE_ADAPTER.dump_python(list(trace), by_alias=True, exclude_none=True)
    return json.dumps(payload, indent=indent, ensure_ascii=False, default=_encode_value)


def trace_from_json(payload: str | bytes) -> Trace:
    """Parse a JSON string into trace elements.

    Raises ``TracegraphLoadError`` on invalid or unparseable input.
    """
    try:
        return TRACE_ADAPTER.validate_json(payload)
    except ValidationError as exc:
        raise TracegraphLoadError(f"Failed to parse trace JSON: {exc}") from exc


def save_trace_json(trace: Trace, path: str | Path, *, indent: int | None = 2) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(trace_to_json(trace, indent=indent), encoding="utf-8")
    return output_path


def load_trace_json(path: str | Path) -> Trace:
    """Load a trace from a JSON file.

    Raises ``TracegraphLoadError`` on invalid content,
    or ``FileNotFoundError`` / ``OSError`` if the file is inaccessible.
    """
    payload = Path(path).read_text(encoding="utf-8")
    return trace_from_json(payload)


def _encode_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return list(value)
    warnings.warn(
        f"Value of type {type(value).__name__} is not JSON serializable; storing its repr.",
        stacklevel=3,
    )
    return f"{value!r} {NON_SERIALIZABLE_MARKER}"
