"""balloon-quake — balloon constellation tracks joined to live earthquakes.

This is the application entry point.  It wires the SnapshotStore,
NormalizerRegistry, RefreshOrchestrator and HTTP routes together.

Run with:
    uvicorn balloon_quake.main:app --port 4000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from balloon_quake.adapters.registry import NormalizerRegistry
from balloon_quake.api.constellation import create_constellation_router
from balloon_quake.api.questions import create_questions_router
from balloon_quake.config import settings
from balloon_quake.services.refresher import RefreshOrchestrator
from balloon_quake.store.snapshot_store import SnapshotStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

# ── State ────────────────────────────────────────────────────────────────────

store = SnapshotStore(max_inquiries=settings.inquiry_log_limit)
registry = NormalizerRegistry.default()
orchestrator = RefreshOrchestrator(store, settings, registry=registry)


# ── Lifecycle ────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(_app: FastAPI):
    # The first cycle must finish before serving; if it raises, startup fails
    await orchestrator.refresh()
    orchestrator.start()
    try:
        yield
    finally:
        await orchestrator.stop()


# ── App ──────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    description="WindBorne balloon tracks with nearest USGS earthquakes",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag"],
)

# ── Routes ───────────────────────────────────────────────────────────────────

app.include_router(create_constellation_router(
    store,
    earthquake_preview_limit=settings.earthquake_preview_limit,
))
app.include_router(create_questions_router(store))


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/health")
async def health() -> dict:
    snapshot = store.current if store.ready else None
    return {
        "ok": True,
        "ready": store.ready,
        "last_refresh": snapshot.meta.last_refresh if snapshot else None,
        "tracks": len(snapshot.tracks) if snapshot else 0,
        "earthquakes": len(snapshot.events) if snapshot else 0,
        "refresh_running": orchestrator.running,
        "adapters": registry.stats,
        "total_normalized": registry.total_accepted,
        "total_dropped": registry.total_rejected,
        "unhandled_records": registry.unhandled_count,
    }


# ── Static client (single-host mode) ─────────────────────────────────────────

class ClientStaticFiles(StaticFiles):
    """Static build that answers unknown paths with ``index.html``.

    Client-side routes have no file on disk, so a deep link would
    otherwise 404.
    """

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
            return await super().get_response("index.html", scope)


_client_build = Path(settings.client_build_dir)
if _client_build.is_dir():
    logger.info("Serving static client build from %s", _client_build)
    app.mount("/", ClientStaticFiles(directory=_client_build, html=True), name="client")

