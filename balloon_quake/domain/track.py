"""EntityTrack — the reconstructed flight history of one balloon.

A track is rebuilt from scratch on every refresh cycle.  All derived
metrics are computed together in :meth:`EntityTrack.from_samples`; nothing
patches them incrementally afterwards.  The only post-construction
enrichment is the nearest-earthquake link, applied by copying.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from balloon_quake.domain.position import PositionSample
from balloon_quake.domain.quake import GeophysicalEvent
from balloon_quake.geo.distance import distance_km


class NearestEventLink(BaseModel):
    """The closest current earthquake to a balloon's latest position."""

    event: GeophysicalEvent
    distance_km: float = Field(..., ge=0.0, description="Great-circle distance, 1 decimal")

    model_config = {"frozen": True}


class EntityTrack(BaseModel):
    """Chronologically ordered samples for one balloon plus summary metrics."""

    entity_id: str
    track: list[PositionSample] = Field(..., min_length=1)
    latest: PositionSample
    first_seen: datetime
    last_seen: datetime
    total_distance_km: float = Field(..., ge=0.0)
    altitude_delta: float
    sample_count: int = Field(..., ge=1)
    nearest_event: Optional[NearestEventLink] = None

    model_config = {"frozen": True}

    @classmethod
    def from_samples(cls, entity_id: str, samples: Sequence[PositionSample]) -> EntityTrack | None:
        """Sort *samples* by time and derive the summary metrics.

        Returns None for an empty sample list; an empty track is never built.
        """
        if not samples:
            return None

        # sorted() is stable: equal timestamps keep their input order
        ordered = sorted(samples, key=lambda s: s.timestamp)
        earliest, latest = ordered[0], ordered[-1]

        return cls(
            entity_id=entity_id,
            track=ordered,
            latest=latest,
            first_seen=earliest.timestamp,
            last_seen=latest.timestamp,
            total_distance_km=round(path_distance_km(ordered), 2),
            altitude_delta=(latest.altitude or 0.0) - (earliest.altitude or 0.0),
            sample_count=len(ordered),
        )


def path_distance_km(points: Sequence[PositionSample]) -> float:
    """Sum of haversine distances between consecutive points."""
    total = 0.0
    for prev, curr in zip(points, points[1:]):
        coords = (prev.latitude, prev.longitude, curr.latitude, curr.longitude)
        if not all(math.isfinite(c) for c in coords):
            continue
        total += distance_km(*coords)
    return total
