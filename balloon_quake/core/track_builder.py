"""Reconstruction of per-balloon histories from hourly frames.

Pure function of its inputs apart from the registry's counters.  Every
record of every frame goes through the normaliser; surviving samples are
grouped by entity id and turned into EntityTracks.
"""

from __future__ import annotations

import logging
from typing import Iterable

from balloon_quake.adapters.registry import NormalizerRegistry
from balloon_quake.domain.position import Frame, PositionSample
from balloon_quake.domain.track import EntityTrack
from balloon_quake.ingest.payload import unwrap_entries

logger = logging.getLogger(__name__)


def collect_samples(frames: Iterable[Frame], registry: NormalizerRegistry) -> dict[str, list[PositionSample]]:
    """Normalise every record and group the samples by entity id."""
    groups: dict[str, list[PositionSample]] = {}
    for frame in frames:
        for index, record in enumerate(unwrap_entries(frame.raw)):
            sample = registry.normalize(record, frame, index)
            if sample is None:
                continue
            groups.setdefault(sample.entity_id, []).append(sample)
    return groups


def build_tracks(frames: Iterable[Frame], registry: NormalizerRegistry | None = None) -> list[EntityTrack]:
    """Build one EntityTrack per distinct entity seen in *frames*.

    No ordering between tracks is implied.
    """
    registry = registry or NormalizerRegistry.default()
    groups = collect_samples(frames, registry)

    tracks: list[EntityTrack] = []
    for entity_id, samples in groups.items():
        track = EntityTrack.from_samples(entity_id, samples)
        if track is not None:
            tracks.append(track)

    logger.debug("Built %d tracks from %d sample groups", len(tracks), len(groups))
    return tracks
