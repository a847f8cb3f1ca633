"""Normalizer Registry — selects a record adapter per raw entry.

The registry holds RecordAdapters in registration order.  Each raw entry
is routed to the first adapter whose can_handle() returns True.

Unlike a strict ingestion boundary, position frames are expected to
contain junk: a record no adapter accepts, or one an adapter rejects, is
simply dropped (counted, logged at DEBUG) and yields None.
"""

from __future__ import annotations

import logging
from typing import Any

from balloon_quake.adapters.array import CoordinateArrayAdapter
from balloon_quake.adapters.base import RecordAdapter
from balloon_quake.adapters.mapping import MappingRecordAdapter
from balloon_quake.domain.position import Frame, PositionSample

logger = logging.getLogger(__name__)


class AdapterStats:
    """Per-adapter normalisation statistics for observability."""

    __slots__ = ("adapter_name", "accepted_count", "rejected_count")

    def __init__(self, adapter_name: str) -> None:
        self.adapter_name = adapter_name
        self.accepted_count: int = 0
        self.rejected_count: int = 0

    def to_dict(self) -> dict:
        return {
            "adapter_name": self.adapter_name,
            "accepted_count": self.accepted_count,
            "rejected_count": self.rejected_count,
        }


class NormalizerRegistry:
    """Registry of record adapters with selection and stats tracking.

    Usage:
        registry = NormalizerRegistry()
        registry.register(CoordinateArrayAdapter())
        registry.register(MappingRecordAdapter())

        sample = registry.normalize(record, frame, index)   # or None
    """

    def __init__(self) -> None:
        self._adapters: list[RecordAdapter] = []
        self._stats: dict[str, AdapterStats] = {}
        self.unhandled_count: int = 0

    @classmethod
    def default(cls) -> NormalizerRegistry:
        """Registry preloaded with the array and mapping adapters."""
        registry = cls()
        registry.register(CoordinateArrayAdapter())
        registry.register(MappingRecordAdapter())
        return registry

    def register(self, adapter: RecordAdapter) -> None:
        """Add an adapter to the registry."""
        self._adapters.append(adapter)
        self._stats[adapter.shape_name] = AdapterStats(adapter.shape_name)
        logger.info("Registered record adapter: %s", adapter.shape_name)

    def normalize(self, record: Any, frame: Frame, index: int) -> PositionSample | None:
        """Route *record* through the first matching adapter.

        Returns:
            A validated PositionSample, or None if the record is unusable.
        """
        for adapter in self._adapters:
            if adapter.can_handle(record):
                stats = self._stats[adapter.shape_name]
                try:
                    sample = adapter.adapt(record, frame, index)
                except ValueError as exc:
                    stats.rejected_count += 1
                    logger.debug("Adapter '%s' dropped record: %s", adapter.shape_name, exc)
                    return None
                stats.accepted_count += 1
                return sample

        self.unhandled_count += 1
        logger.debug(
            "No adapter for %s record %d in frame %s",
            type(record).__name__,
            index,
            frame.hour_tag,
        )
        return None

    @property
    def adapter_names(self) -> list[str]:
        """Registered adapter names in registration order."""
        return [a.shape_name for a in self._adapters]

    @property
    def stats(self) -> list[dict]:
        """Per-adapter stats for observability endpoints."""
        return [s.to_dict() for s in self._stats.values()]

    @property
    def total_accepted(self) -> int:
        return sum(s.accepted_count for s in self._stats.values())

    @property
    def total_rejected(self) -> int:
        return sum(s.rejected_count for s in self._stats.values())
