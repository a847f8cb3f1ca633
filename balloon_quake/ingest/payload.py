"""Lenient decoding and unwrapping of hourly position payloads.

The position source is not guaranteed to serve clean JSON.  Bodies are
parsed strictly first, then with json5 (trailing commas, comments, bare
NaN).  Non-finite numbers are replaced with None so the payload can be
re-serialised as strict JSON by the API.
"""

from __future__ import annotations

import json
import math
from typing import Any

import json5


def decode_json(text: str) -> Any:
    """Parse *text* as JSON, falling back to json5.

    Raises:
        ValueError: If neither parser accepts the body, or it is nested
            too deeply to decode.
    """
    try:
        try:
            data = json.loads(text)
        except ValueError:
            data = json5.loads(text)
        return scrub_non_finite(data)
    except RecursionError as exc:
        raise ValueError("payload is nested too deeply") from exc



def scrub_non_finite(value: Any) -> Any:
    """Recursively replace NaN / ±Infinity floats with None."""
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, list):
        return [scrub_non_finite(v) for v in value]
    if isinstance(value, dict):
        return {k: scrub_non_finite(v) for k, v in value.items()}
    return value


def unwrap_entries(payload: Any) -> list[Any]:
    """Extract the list of raw position records from a decoded payload.

    Accepted shapes, in priority order:
        - a bare list of records
        - an object with a ``balloons`` or ``constellation`` list
        - an object whose ``data`` member wraps one of these, at any depth
        - any other object, whose values are taken as the records
    """
    while isinstance(payload, dict) and "data" in payload:
        if isinstance(payload.get("balloons"), list) or isinstance(payload.get("constellation"), list):
            break
        if not (payload["data"] is None or isinstance(payload["data"], (dict, list))):
            break
        payload = payload["data"]
    if not payload:
        return []
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if isinstance(payload.get("balloons"), list):
            return payload["balloons"]
        if isinstance(payload.get("constellation"), list):
            return payload["constellation"]
        return list(payload.values())
    return []


def count_entries(payload: Any) -> int:
    """Number of top-level entries in a payload (list items or object keys)."""
    if isinstance(payload, (list, dict)):
        return len(payload)
    return 0
