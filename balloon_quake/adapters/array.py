"""CoordinateArrayAdapter — bare ``[lat, lon, altitude?]`` records.

Expected raw format:
    [37.41, -122.08, 17.3]

Array records carry no identifier, so one is synthesised from the frame
tag and position.  That id is NOT stable across refresh cycles.
"""

from __future__ import annotations

from typing import Any

from balloon_quake.adapters.base import RecordAdapter
from balloon_quake.adapters.fields import coerce_float
from balloon_quake.domain.position import Frame, PositionSample


class CoordinateArrayAdapter(RecordAdapter):
    """Maps ordered number lists to PositionSamples."""

    @property
    def shape_name(self) -> str:
        return "coordinate_array"

    def can_handle(self, record: Any) -> bool:
        return isinstance(record, (list, tuple))

    def adapt(self, record: Any, frame: Frame, index: int) -> PositionSample:
        values = list(record) + [None] * (3 - len(record))
        lat, lon, altitude = (coerce_float(v) for v in values[:3])
        if lat is None or lon is None:
            raise ValueError(f"array record {index} in frame {frame.hour_tag} lacks finite lat/lon")

        return PositionSample(
            entity_id=f"coord-{frame.hour_tag}-{index}",
            timestamp=frame.timestamp,
            hour_tag=frame.hour_tag,
            latitude=lat,
            longitude=lon,
            altitude=altitude,
            raw={"lat": values[0], "lon": values[1], "altitude": values[2]},
        )
