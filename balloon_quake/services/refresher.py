"""Refresh orchestrator — recomputes and publishes snapshots on a timer.

One cycle:
    1. fetch every lookback frame + the earthquake feed concurrently
    2. build tracks from the frames (oldest frame first)
    3. join each track to its nearest earthquake
    4. publish a new Snapshot with a fresh change token

Fetch failures never escape a cycle: the loaders drop failed hours and
fall back to an empty event list.  Anything else that goes wrong is
raised by refresh() and logged by refresh_safely(), leaving the previous
snapshot published.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from balloon_quake.adapters.registry import NormalizerRegistry
from balloon_quake.config import Settings
from balloon_quake.core.nearest import attach_nearest_events
from balloon_quake.core.track_builder import build_tracks
from balloon_quake.domain.snapshot import Snapshot, SnapshotMeta
from balloon_quake.foundation.clock import utc_now
from balloon_quake.foundation.identifiers import new_change_token
from balloon_quake.ingest.earthquakes import fetch_earthquakes
from balloon_quake.ingest.frames import load_frames
from balloon_quake.store.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class RefreshOrchestrator:
    """Owns the refresh cadence and the snapshot it publishes.

    Args:
        store: Where finished snapshots are published.
        settings: Source URLs, timeouts, lookback and interval.
        registry: Record normaliser; defaults to the array + mapping adapters.
        transport: Optional httpx transport (tests inject a MockTransport).
    """

    def __init__(
        self,
        store: SnapshotStore,
        settings: Settings,
        registry: NormalizerRegistry | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._store = store
        self._settings = settings
        self._registry = registry or NormalizerRegistry.default()
        self._transport = transport
        self._task: asyncio.Task | None = None

    @property
    def registry(self) -> NormalizerRegistry:
        return self._registry

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ── One cycle ────────────────────────────────────────────────────────

    async def refresh(self) -> Snapshot:
        """Run one full cycle and publish its snapshot."""
        s = self._settings
        async with httpx.AsyncClient(transport=self._transport, follow_redirects=True) as client:
            frames, events = await asyncio.gather(
                load_frames(client, s.wind_base_url, s.lookback_hours, s.frame_timeout_seconds),
                fetch_earthquakes(client, s.earthquake_url, s.earthquake_timeout_seconds),
            )

        tracks = attach_nearest_events(build_tracks(frames, self._registry), events)
        snapshot = Snapshot(
            frames=[f.summary() for f in frames],
            tracks=tracks,
            events=events,
            meta=SnapshotMeta(
                last_refresh=utc_now(),
                etag=new_change_token(),
                dataset_note=s.dataset_note,
            ),
        )
        self._store.publish(snapshot)
        return snapshot

    async def refresh_safely(self) -> bool:
        """Run a cycle; log and swallow failures.  Returns True on success."""
        try:
            await self.refresh()
        except Exception:
            logger.exception("Refresh cycle failed; keeping previous snapshot")
            return False
        return True

    # ── Background loop ──────────────────────────────────────────────────

    async def run_forever(self) -> None:
        interval = self._settings.refresh_interval_seconds
        while True:
            await asyncio.sleep(interval)
            await self.refresh_safely()

    def start(self) -> asyncio.Task:
        """Start the periodic refresh task (idempotent)."""
        if not self.running:
            self._task = asyncio.create_task(self.run_forever(), name="snapshot-refresh")
            logger.info(
                "Refresh loop started (every %.0fs)", self._settings.refresh_interval_seconds
            )
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Refresh loop stopped")
