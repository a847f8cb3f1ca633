"""USGS earthquake feed client and normaliser.

Fetches the real-time GeoJSON summary feed and converts each feature into
a GeophysicalEvent.  Features without a usable ``[lon, lat]`` pair are
dropped; everything else about a feature is best-effort.

Feed format (abridged):
    {"features": [
        {"id": "us7000abcd",
         "properties": {"mag": 4.6, "place": "...", "time": 1700000000000, "url": "..."},
         "geometry": {"coordinates": [lon, lat, depth_km]}}
    ]}
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from balloon_quake.adapters.fields import coerce_float
from balloon_quake.domain.quake import GeophysicalEvent
from balloon_quake.foundation.clock import from_epoch_millis
from balloon_quake.ingest.payload import decode_json

logger = logging.getLogger(__name__)


def _parse_coordinates(raw: Any) -> Optional[list[float]]:
    if not isinstance(raw, (list, tuple)) or len(raw) < 2:
        return None
    lon, lat = coerce_float(raw[0]), coerce_float(raw[1])
    if lon is None or lat is None:
        return None
    coords = [lon, lat]
    depth = coerce_float(raw[2]) if len(raw) > 2 else None
    if depth is not None:
        coords.append(depth)
    return coords


def _parse_time(raw: Any):
    millis = coerce_float(raw)
    if millis is None:
        return None
    try:
        return from_epoch_millis(millis)
    except (OverflowError, OSError, ValueError):
        return None


def normalize_feature(feature: Any) -> GeophysicalEvent | None:
    """Convert one GeoJSON feature, or return None if it has no valid position."""
    if not isinstance(feature, dict):
        return None
    props = feature.get("properties")
    if not isinstance(props, dict):
        props = {}
    geometry = feature.get("geometry")
    coords = _parse_coordinates(geometry.get("coordinates") if isinstance(geometry, dict) else None)
    if coords is None:
        return None

    event_id = feature.get("id")
    place = props.get("place")
    url = props.get("url")
    return GeophysicalEvent(
        event_id=str(event_id) if event_id is not None else None,
        magnitude=coerce_float(props.get("mag")),
        place=place if isinstance(place, str) else "Unknown",
        # An unparseable time keeps the event with occurred_at=None
        occurred_at=_parse_time(props.get("time")),
        url=url if isinstance(url, str) else None,
        coordinates=coords,
    )


def normalize_feed(payload: Any) -> list[GeophysicalEvent]:
    """Normalise a feature collection, preserving feed order."""
    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        return []
    events = [normalize_feature(f) for f in payload["features"]]
    return [e for e in events if e is not None]


async def fetch_earthquakes(
    client: httpx.AsyncClient,
    url: str,
    timeout: float = 8.0,
) -> list[GeophysicalEvent]:
    """Fetch and normalise the feed.  Returns [] on any fetch failure."""
    try:
        resp = await client.get(url, timeout=timeout)
        resp.raise_for_status()
        payload = decode_json(resp.text)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Failed to load earthquake feed: %s", exc)
        return []

    events = normalize_feed(payload)
    logger.info("Loaded %d earthquakes", len(events))
    return events
