"""Abstract base for position-record adapters.

Record adapters normalise one raw entry from an hourly frame into the
canonical PositionSample model.

Architectural rules:
    1. Adapters must NOT mutate the incoming record.
    2. adapt() must return a fully valid PositionSample or raise ValueError.
    3. Adapters are pure: no I/O, no logging of rejected records as errors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from balloon_quake.domain.position import Frame, PositionSample


class RecordAdapter(ABC):
    """Base class for converting raw frame entries into PositionSamples."""

    @abstractmethod
    def can_handle(self, record: Any) -> bool:
        """Return True if this adapter knows the shape of *record*.

        Must be a fast, non-destructive check (e.g. type inspection).
        """
        ...

    @abstractmethod
    def adapt(self, record: Any, frame: Frame, index: int) -> PositionSample:
        """Translate *record* taken from position *index* of *frame*.

        Raises:
            ValueError: If the record lacks finite coordinates.
        """
        ...

    @property
    @abstractmethod
    def shape_name(self) -> str:
        """Short name of the record shape this adapter handles."""
        ...
