"""In-memory snapshot store with atomic publication.

Design notes:
    - The published Snapshot is immutable and replaced by a single
      reference assignment.  Readers grab ``store.current`` once and work
      from that object, so they never observe a half-built cycle and no
      lock is needed on the read path.
    - The store is not "ready" until the first refresh has published,
      even if that snapshot is empty.
    - Submitted inquiries are appended under an asyncio.Lock so concurrent
      request handlers never interleave writes.  The log keeps only the
      newest ``max_inquiries`` entries.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque

from balloon_quake.domain.inquiry import Inquiry
from balloon_quake.domain.snapshot import Snapshot
from balloon_quake.domain.track import EntityTrack

logger = logging.getLogger(__name__)


class SnapshotNotReadyError(RuntimeError):
    """Raised when a query needs a snapshot before the first refresh."""


class SnapshotStore:
    """Holds the latest published Snapshot and the inquiry log."""

    def __init__(self, max_inquiries: int = 1000) -> None:
        self._snapshot: Snapshot | None = None
        # Oldest inquiries fall off once the log is full
        self._inquiries: deque[Inquiry] = deque(maxlen=max_inquiries)
        self._inquiry_lock = asyncio.Lock()

    # ── Publication ──────────────────────────────────────────────────────

    def publish(self, snapshot: Snapshot) -> None:
        """Atomically replace the published snapshot."""
        self._snapshot = snapshot
        logger.info(
            "Published snapshot %s (%d tracks, %d events, %d frames)",
            snapshot.meta.etag,
            len(snapshot.tracks),
            len(snapshot.events),
            len(snapshot.frames),
        )

    @property
    def ready(self) -> bool:
        return self._snapshot is not None

    @property
    def current(self) -> Snapshot:
        """The most recently published snapshot.

        Raises:
            SnapshotNotReadyError: Before the first publish.
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise SnapshotNotReadyError("No refresh has completed yet")
        return snapshot

    # ── Queries ──────────────────────────────────────────────────────────

    def find_track(self, entity_id: str) -> EntityTrack | None:
        """Exact-id lookup in the current snapshot; None when unknown."""
        return self.current.find_track(entity_id)

    def list_tracks(self) -> list[EntityTrack]:
        """All tracks of the current snapshot, most recently seen first."""
        return self.current.tracks_by_recency()

    # ── Inquiries ────────────────────────────────────────────────────────

    async def submit_inquiry(self, message: object, contact: object) -> Inquiry:
        """Validate and record an inquiry.

        Raises:
            InquiryValidationError: If message or contact is unusable.
        """
        inquiry = Inquiry.from_submission(message, contact)
        async with self._inquiry_lock:
            self._inquiries.append(inquiry)
        logger.info("New question received: %s from %s", inquiry.inquiry_id, inquiry.contact)
        return inquiry

    async def inquiries(self) -> list[Inquiry]:
        async with self._inquiry_lock:
            return list(self._inquiries)
