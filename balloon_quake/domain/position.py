"""Position models: hourly frames and the samples extracted from them.

A Frame is one hourly snapshot fetched from the position source.  A
PositionSample is one observation of one balloon inside a frame.  The
sample model is strict: coordinates are validated at construction so
nothing downstream has to re-check them.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from balloon_quake.foundation.clock import ensure_utc


# ── Frames ───────────────────────────────────────────────────────────────────

class FrameSummary(BaseModel):
    """Metadata of one fetched frame, published with every snapshot."""

    hour_tag: str = Field(..., description="Two-digit lookback hour, '00' is the most recent")
    timestamp: datetime = Field(..., description="Nominal capture time of the frame")
    record_count: int = Field(..., ge=0, description="Top-level entries in the raw payload")

    model_config = {"frozen": True}


class Frame(FrameSummary):
    """A fetched frame together with its decoded payload."""

    raw: Any = Field(default=None, description="Decoded JSON payload, shape unknown")

    def summary(self) -> FrameSummary:
        return FrameSummary(
            hour_tag=self.hour_tag,
            timestamp=self.timestamp,
            record_count=self.record_count,
        )


# ── Samples ──────────────────────────────────────────────────────────────────

class PositionSample(BaseModel):
    """One observation of one balloon at one point in time."""

    entity_id: str = Field(..., min_length=1, description="Balloon identifier")
    timestamp: datetime = Field(..., description="Observation time (UTC-aware)")
    hour_tag: str = Field(..., description="Tag of the frame this sample came from")
    latitude: float
    longitude: float
    altitude: Optional[float] = None
    speed: Optional[float] = None
    bearing: Optional[float] = None
    raw: Any = Field(default=None, description="Source record, retained for diagnostics")

    model_config = {"frozen": True}

    @field_validator("latitude", "longitude")
    @classmethod
    def coordinate_must_be_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("coordinate must be a finite number")
        return v

    @field_validator("timestamp")
    @classmethod
    def timestamp_must_be_aware(cls, v: datetime) -> datetime:
        return ensure_utc(v)
