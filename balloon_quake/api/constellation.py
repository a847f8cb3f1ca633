"""REST endpoints for balloon tracks and earthquakes.

Paths:
    GET /api/constellation        enriched tracks + frames + recent quakes
    GET /api/balloons/{id}        one track by exact id
    GET /api/earthquakes          full earthquake list

Every handler reads ``store.current`` exactly once so the response comes
from a single snapshot even if a refresh publishes mid-request.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response

from balloon_quake.domain.snapshot import Snapshot
from balloon_quake.store.snapshot_store import SnapshotNotReadyError, SnapshotStore

logger = logging.getLogger(__name__)


def _snapshot_or_503(store: SnapshotStore) -> Snapshot:
    try:
        return store.current
    except SnapshotNotReadyError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def create_constellation_router(
    store: SnapshotStore,
    earthquake_preview_limit: int = 10,
) -> APIRouter:
    """Factory that wires the query endpoints to a SnapshotStore."""

    router = APIRouter(prefix="/api", tags=["constellation"])

    @router.get("/constellation")
    async def constellation(request: Request, response: Response) -> Any:
        """Tracks (most recently seen first), frame summaries and recent quakes.

        Honours ``If-None-Match`` against the snapshot's change token.
        """
        snapshot = _snapshot_or_503(store)
        etag = snapshot.meta.etag
        if request.headers.get("if-none-match") == etag:
            return Response(status_code=304, headers={"ETag": etag})

        response.headers["ETag"] = etag
        return {
            "balloons": snapshot.tracks_by_recency(),
            "frames": snapshot.frames,
            "earthquakes": snapshot.events[:earthquake_preview_limit],
            "meta": snapshot.meta,
        }

    @router.get("/balloons/{entity_id}")
    async def balloon(entity_id: str) -> Any:
        track = _snapshot_or_503(store).find_track(entity_id)
        if track is None:
            raise HTTPException(status_code=404, detail="Balloon not found")
        return track

    @router.get("/earthquakes")
    async def earthquakes() -> dict[str, Any]:
        snapshot = _snapshot_or_503(store)
        return {"earthquakes": snapshot.events, "meta": snapshot.meta}

    return router
