"""MappingRecordAdapter — flat or nested object records.

Expected raw formats (any alias from the field tables is accepted):
    {"id": "wb-17", "lat": 12.5, "lon": 40.1, "alt": 18000, "time": "..."}
    {"name": "wb-17", "location": {"latitude": 12.5, "lng": 40.1}}
    {"serial": 17, "coordinates": [40.1, 12.5]}       # pair is [lon, lat]
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from balloon_quake.adapters import fields
from balloon_quake.adapters.base import RecordAdapter
from balloon_quake.domain.position import Frame, PositionSample


class MappingRecordAdapter(RecordAdapter):
    """Maps dict records to PositionSamples via the alias tables."""

    @property
    def shape_name(self) -> str:
        return "mapping"

    def can_handle(self, record: Any) -> bool:
        return isinstance(record, Mapping)

    def adapt(self, record: Any, frame: Frame, index: int) -> PositionSample:
        lat = fields.LATITUDE.first_number(record)
        lon = fields.LONGITUDE.first_number(record)
        if lat is None or lon is None:
            raise ValueError(f"record {index} in frame {frame.hour_tag} lacks finite lat/lon")

        entity_id = fields.ENTITY_ID.first_truthy(record)
        if entity_id is None:
            entity_id = f"unknown-{frame.hour_tag}-{index}"

        return PositionSample(
            entity_id=str(entity_id),
            timestamp=fields.TIMESTAMP.first_timestamp(record) or frame.timestamp,
            hour_tag=frame.hour_tag,
            latitude=lat,
            longitude=lon,
            altitude=fields.ALTITUDE.first_number(record),
            speed=fields.SPEED.first_number(record),
            bearing=fields.BEARING.first_number(record),
            raw=record,
        )
