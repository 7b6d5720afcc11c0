"""Stable hashing of call inputs."""

from __future__ import annotations

import hashlib
import json


def generate_hash_id(*inputs: object) -> str:
    """SHA-256 hex digest of the JSON-encoded inputs (``repr`` for the rest)."""
    payload = json.dumps(list(inputs), sort_keys=True, default=repr)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
