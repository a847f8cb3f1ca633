"""Declarative field-alias tables for loosely structured position records.

Upstream records name the same attribute in many ways (``lat`` vs
``latitude``, a nested ``location`` object, a ``[lon, lat]`` pair, ...).
Each attribute is declared as an ordered tuple of accessors; extraction
tries them in order and stops at the first usable value.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping

from dateutil import parser as dtparser

from balloon_quake.foundation.clock import ensure_utc, from_epoch_millis

Accessor = Callable[[Mapping[str, Any]], Any]

# Epoch values at or above this magnitude are milliseconds, below it seconds
_MILLIS_THRESHOLD = 1e11

_NUMERIC = re.compile(r"[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?")

LOCATION_KEYS = ("location", "position", "coordinates", "coord", "coords")


# ── Value coercion ───────────────────────────────────────────────────────────

def coerce_float(value: Any) -> float | None:
    """Return *value* as a finite float, or None.

    Accepts ints, floats and numeric strings.  Booleans, None, blanks and
    non-finite numbers are treated as absent.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _NUMERIC.fullmatch(text):
            return None
        number = float(text)
    else:
        return None
    return number if math.isfinite(number) else None


def coerce_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-ish string or an epoch number into an aware UTC datetime."""
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        if isinstance(value, (int, float)):
            return _from_epoch(float(value))
        if isinstance(value, str):
            text = value.strip()
            if _NUMERIC.fullmatch(text):
                return _from_epoch(float(text))
            return ensure_utc(dtparser.parse(text))
    except (ValueError, OverflowError, OSError):
        return None
    return None


def _from_epoch(value: float) -> datetime | None:
    if not math.isfinite(value):
        return None
    if abs(value) >= _MILLIS_THRESHOLD:
        return from_epoch_millis(value)
    return from_epoch_millis(value * 1000.0)


# ── Accessors ────────────────────────────────────────────────────────────────

def key(name: str) -> Accessor:
    """Top-level field ``record[name]``."""
    return lambda record: record.get(name)


def location_of(record: Mapping[str, Any]) -> Any:
    """The first truthy nested location container, if any."""
    for name in LOCATION_KEYS:
        value = record.get(name)
        if value:
            return value
    return None


def location_key(name: str) -> Accessor:
    """Field *name* inside the nested location object."""

    def access(record: Mapping[str, Any]) -> Any:
        location = location_of(record)
        if isinstance(location, Mapping):
            return location.get(name)
        return None

    return access


def location_index(index: int) -> Accessor:
    """Element *index* of a nested coordinate pair (longitude first)."""

    def access(record: Mapping[str, Any]) -> Any:
        location = location_of(record)
        if isinstance(location, (list, tuple)) and len(location) > index:
            return location[index]
        return None

    return access


# ── Alias tables ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FieldAliases:
    """Ordered accessor attempts for one semantic attribute."""

    attribute: str
    accessors: tuple[Accessor, ...]

    def _values(self, record: Mapping[str, Any]):
        for accessor in self.accessors:
            yield accessor(record)

    def first_truthy(self, record: Mapping[str, Any]) -> Any:
        for value in self._values(record):
            if value:
                return value
        return None

    def first_number(self, record: Mapping[str, Any]) -> float | None:
        for value in self._values(record):
            number = coerce_float(value)
            if number is not None:
                return number
        return None

    def first_timestamp(self, record: Mapping[str, Any]) -> datetime | None:
        for value in self._values(record):
            parsed = coerce_timestamp(value)
            if parsed is not None:
                return parsed
        return None


ENTITY_ID = FieldAliases("entity_id", tuple(key(k) for k in (
    "id", "balloonId", "balloon_id", "callsign", "name", "serial", "device", "device_id",
)))

LATITUDE = FieldAliases("latitude", (
    key("lat"),
    key("latitude"),
    location_key("lat"),
    location_key("latitude"),
    location_index(1),
))

LONGITUDE = FieldAliases("longitude", (
    key("lon"),
    key("lng"),
    key("longitude"),
    location_key("lon"),
    location_key("lng"),
    location_key("longitude"),
    location_index(0),
))

ALTITUDE = FieldAliases("altitude", tuple(key(k) for k in ("altitude", "alt", "elevation", "height")))
SPEED = FieldAliases("speed", tuple(key(k) for k in ("speed", "vel", "velocity")))
BEARING = FieldAliases("bearing", tuple(key(k) for k in ("bearing", "heading", "course")))
TIMESTAMP = FieldAliases("timestamp", tuple(key(k) for k in ("timestamp", "time", "recorded_at", "ts")))
