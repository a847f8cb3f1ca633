"""Earthquake events, normalised from the USGS feed."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class GeophysicalEvent(BaseModel):
    """An earthquake as published by the upstream feed.

    ``coordinates`` keeps the feed's GeoJSON axis order (longitude first,
    optional depth third).  Use :attr:`latitude` / :attr:`longitude` rather
    than indexing so the axis order is resolved in one place.
    """

    event_id: Optional[str] = None
    magnitude: Optional[float] = None
    place: str = "Unknown"
    occurred_at: Optional[datetime] = Field(
        default=None,
        description="Origin time; None when the feed's value could not be parsed",
    )
    url: Optional[str] = None
    coordinates: list[float] = Field(..., min_length=2, max_length=3)

    model_config = {"frozen": True}

    @field_validator("coordinates")
    @classmethod
    def lon_lat_must_be_finite(cls, v: list[float]) -> list[float]:
        if not (math.isfinite(v[0]) and math.isfinite(v[1])):
            raise ValueError("longitude and latitude must be finite numbers")
        return v

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]

    @property
    def depth_km(self) -> float | None:
        return self.coordinates[2] if len(self.coordinates) > 2 else None
