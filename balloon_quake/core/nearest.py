"""Nearest-event joiner.

Links every track's latest sample to the closest earthquake in the current
feed.  A linear scan per track: both sets are in the hundreds and the join
runs once per refresh, not per request.
"""

from __future__ import annotations

import math
from typing import Sequence

from balloon_quake.domain.position import PositionSample
from balloon_quake.domain.quake import GeophysicalEvent
from balloon_quake.domain.track import EntityTrack, NearestEventLink
from balloon_quake.geo.distance import distance_km


def find_nearest_event(
    sample: PositionSample,
    events: Sequence[GeophysicalEvent],
) -> NearestEventLink | None:
    """Return the closest event to *sample*, first one winning ties."""
    nearest: GeophysicalEvent | None = None
    best = math.inf

    for event in events:
        d = distance_km(event.latitude, event.longitude, sample.latitude, sample.longitude)
        if d < best:
            best = d
            nearest = event

    if nearest is None:
        return None
    return NearestEventLink(event=nearest, distance_km=round(best, 1))


def attach_nearest_events(
    tracks: Sequence[EntityTrack],
    events: Sequence[GeophysicalEvent],
) -> list[EntityTrack]:
    """Copy each track with its nearest-event link attached.

    With no events the tracks are returned as they are, with no link.
    """
    if not events:
        return list(tracks)
    return [
        track.model_copy(update={"nearest_event": find_nearest_event(track.latest, events)})
        for track in tracks
    ]
