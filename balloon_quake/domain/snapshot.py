"""Snapshot — the complete, immutable output of one refresh cycle."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from balloon_quake.domain.position import FrameSummary
from balloon_quake.domain.quake import GeophysicalEvent
from balloon_quake.domain.track import EntityTrack


class SnapshotMeta(BaseModel):
    """Refresh metadata that query callers use for change detection."""

    last_refresh: Optional[datetime] = None
    etag: str = Field(..., min_length=1, description="Change token; differs on every refresh")
    dataset_note: str = ""

    model_config = {"frozen": True}


class Snapshot(BaseModel):
    """Tracks, events and frame metadata from a single refresh.

    Published by whole-object replacement, never mutated, so a reader
    holding a reference always sees one consistent cycle.
    """

    frames: list[FrameSummary] = Field(default_factory=list)
    tracks: list[EntityTrack] = Field(default_factory=list)
    events: list[GeophysicalEvent] = Field(default_factory=list)
    meta: SnapshotMeta

    model_config = {"frozen": True}

    def find_track(self, entity_id: str) -> EntityTrack | None:
        for track in self.tracks:
            if track.entity_id == entity_id:
                return track
        return None

    def tracks_by_recency(self) -> list[EntityTrack]:
        """Tracks ordered most recently seen first."""
        return sorted(self.tracks, key=lambda t: t.last_seen, reverse=True)
