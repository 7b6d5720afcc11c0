"""Convert raised values into plain, serializable records."""

from __future__ import annotations

import json


def safe_error(error: object) -> object:
    """Return ``{"name", "code", "message"}`` for exceptions.

    Anything else is round-tripped through JSON, falling back to ``str``
    for circular or non-serializable values.
    """
    if isinstance(error, BaseException):
        code = getattr(error, "code", None)
        if code is None and isinstance(error, OSError):
            code = error.errno
        if code is not None and not isinstance(code, (str, int, float, bool)):
            code = str(code)
        return {"name": type(error).__name__, "code": code, "message": str(error)}

    try:
        return json.loads(json.dumps(error))
    except (TypeError, ValueError):
        return str(error)
