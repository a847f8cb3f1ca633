"""REST endpoint for dashboard inquiries.

Path: POST /api/questions

Body: {"message": "...", "contact": "..."}.  Both must be non-blank
strings; otherwise 400 with the reason.  Accepted inquiries are stored
in the SnapshotStore and acknowledged with 202.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, HTTPException

from balloon_quake.domain.inquiry import InquiryValidationError
from balloon_quake.store.snapshot_store import SnapshotStore


def create_questions_router(store: SnapshotStore) -> APIRouter:
    """Factory that wires the inquiry endpoint to a SnapshotStore."""

    router = APIRouter(prefix="/api", tags=["questions"])

    @router.post("/questions", status_code=202)
    async def submit_question(payload: Any = Body(default=None)) -> dict[str, Any]:
        body = payload if isinstance(payload, dict) else {}
        try:
            inquiry = await store.submit_inquiry(body.get("message"), body.get("contact"))
        except InquiryValidationError as exc:
            raise HTTPException(status_code=400, detail=exc.reason) from exc
        return {"ok": True, "received": inquiry}

    return router
