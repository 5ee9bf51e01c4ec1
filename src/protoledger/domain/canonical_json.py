"""Deterministic JSON serialization with sorted keys.

The same data always produces the same string regardless of dict insertion
order. Output matches the browser's ``JSON.stringify`` encoding for the
values documents actually carry: compact separators, raw non-ASCII, integral
floats rendered as integers and non-finite numbers as ``null``.
"""

import json
import math
from datetime import date, datetime
from typing import Any


def _normalize(value: Any, seen: set[int]) -> Any:
    """Convert value into plain JSON types, rejecting cycles."""
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        marker = id(value)
        if marker in seen:
            raise ValueError("Circular reference detected")
        seen.add(marker)
        out = {}
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"Object keys must be strings, got {type(k).__name__}")
            out[k] = _normalize(v, seen)
        seen.discard(marker)
        return out
    if isinstance(value, (list, tuple)):
        marker = id(value)
        if marker in seen:
            raise ValueError("Circular reference detected")
        seen.add(marker)
        out_list = [_normalize(v, seen) for v in value]
        seen.discard(marker)
        return out_list
    raise TypeError(f"Value of type {type(value).__name__} is not JSON serializable")


def canonical_dumps(value: Any) -> str:
    """Serialize value to a canonical JSON string (keys sorted at every level)."""
    return json.dumps(
        _normalize(value, set()),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def serialized_size(value: Any) -> int:
    """UTF-8 byte length of the canonical serialization."""
    return len(canonical_dumps(value).encode("utf-8"))
