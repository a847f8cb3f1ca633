"""Frame loader for the hourly position snapshots.

One request per lookback hour, ``<base_url>/00.json`` (latest) through
``<base_url>/23.json``.  Requests run concurrently; any hour that times
out, errors, returns a non-2xx status or an undecodable body is left out
of the batch rather than failing it.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta

import httpx

from balloon_quake.domain.position import Frame
from balloon_quake.foundation.clock import utc_now
from balloon_quake.ingest.payload import count_entries, decode_json

logger = logging.getLogger(__name__)

MAX_LOOKBACK_HOURS = 24


def frame_url(base_url: str, hour_offset: int) -> str:
    return f"{base_url.rstrip('/')}/{hour_offset:02d}.json"


async def fetch_frame(
    client: httpx.AsyncClient,
    base_url: str,
    hour_offset: int,
    now: datetime,
    timeout: float = 10.0,
) -> Frame | None:
    """Fetch and decode one hourly frame, or return None on any failure."""
    url = frame_url(base_url, hour_offset)
    try:
        resp = await client.get(url, timeout=timeout)
        resp.raise_for_status()
        payload = decode_json(resp.text)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Failed to load %s: %s", url, exc)
        return None

    if payload is None or payload == "":
        logger.warning("Empty payload from %s", url)
        return None

    return Frame(
        hour_tag=f"{hour_offset:02d}",
        timestamp=now - timedelta(hours=hour_offset),
        record_count=count_entries(payload),
        raw=payload,
    )


async def load_frames(
    client: httpx.AsyncClient,
    base_url: str,
    lookback_hours: int = MAX_LOOKBACK_HOURS,
    timeout: float = 10.0,
    now: datetime | None = None,
) -> list[Frame]:
    """Fetch every lookback hour concurrently.

    Returns the frames that loaded, oldest first regardless of the order
    in which the requests completed.
    """
    now = now or utc_now()
    hours = min(lookback_hours, MAX_LOOKBACK_HOURS)
    results = await asyncio.gather(
        *(fetch_frame(client, base_url, h, now, timeout) for h in range(hours)),
        return_exceptions=True,
    )
    frames: list[Frame] = []
    for hour, result in enumerate(results):
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
        elif isinstance(result, Exception):
            logger.warning("Dropping hour %02d after unexpected error: %r", hour, result)
        elif result is not None:
            frames.append(result)

    frames.sort(key=lambda f: f.timestamp)
    logger.info("Loaded %d/%d position frames", len(frames), hours)
    return frames
