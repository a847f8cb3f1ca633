"""Tests for the SnapshotStore and inquiry handling."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from balloon_quake.domain.inquiry import Inquiry, InquiryValidationError
from balloon_quake.domain.position import PositionSample
from balloon_quake.domain.snapshot import Snapshot, SnapshotMeta
from balloon_quake.domain.track import EntityTrack
from balloon_quake.store.snapshot_store import SnapshotNotReadyError, SnapshotStore

_BASE = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _track(entity_id: str, last_seen: datetime) -> EntityTrack:
    sample = PositionSample(entity_id=entity_id, timestamp=last_seen, hour_tag="00", latitude=1, longitude=2)
    return EntityTrack.from_samples(entity_id, [sample])


def make_snapshot(*tracks: EntityTrack, etag: str = "t1", events=None) -> Snapshot:
    return Snapshot(
        tracks=list(tracks),
        events=events or [],
        meta=SnapshotMeta(last_refresh=_BASE, etag=etag, dataset_note="note"),
    )


@pytest.fixture
def store() -> SnapshotStore:
    return SnapshotStore()


class TestSnapshotStore:
    def test_not_ready_before_first_publish(self, store: SnapshotStore) -> None:
        assert not store.ready
        with pytest.raises(SnapshotNotReadyError):
            store.list_tracks()

    def test_empty_snapshot_is_ready(self, store: SnapshotStore) -> None:
        store.publish(make_snapshot())
        assert store.ready
        assert store.list_tracks() == []

    def test_publish_replaces_whole_snapshot(self, store: SnapshotStore) -> None:
        old = make_snapshot(_track("a", _BASE), etag="t1")
        store.publish(old)
        held = store.current
        store.publish(make_snapshot(_track("b", _BASE), etag="t2"))

        assert held is old
        assert [t.entity_id for t in held.tracks] == ["a"]
        assert store.find_track("a") is None
        assert store.find_track("b") is not None

    def test_find_track_exact_match(self, store: SnapshotStore) -> None:
        store.publish(make_snapshot(_track("wb-1", _BASE), _track("wb-10", _BASE)))
        assert store.find_track("wb-1").entity_id == "wb-1"
        assert store.find_track("WB-1") is None
        assert store.find_track("wb") is None

    def test_list_tracks_most_recent_first(self, store: SnapshotStore) -> None:
        store.publish(make_snapshot(
            _track("old", _BASE - timedelta(hours=5)),
            _track("new", _BASE),
            _track("mid", _BASE - timedelta(hours=1)),
        ))
        assert [t.entity_id for t in store.list_tracks()] == ["new", "mid", "old"]


class TestInquiries:
    @pytest.mark.asyncio
    async def test_valid_submission_acknowledged(self, store: SnapshotStore) -> None:
        inquiry = await store.submit_inquiry("  Where is wb-3?  ", " me@example.com ")
        assert inquiry.inquiry_id
        assert inquiry.message == "Where is wb-3?"
        assert inquiry.contact == "me@example.com"
        assert inquiry.received_at.tzinfo is not None
        assert await store.inquiries() == [inquiry]

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, store: SnapshotStore) -> None:
        a = await store.submit_inquiry("q1", "c")
        b = await store.submit_inquiry("q2", "c")
        assert a.inquiry_id != b.inquiry_id

    @pytest.mark.asyncio
    async def test_log_keeps_only_newest(self) -> None:
        store = SnapshotStore(max_inquiries=2)
        for i in range(4):
            await store.submit_inquiry(f"q{i}", "c")
        assert [i.message for i in await store.inquiries()] == ["q2", "q3"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message, contact, reason", [
        (None, "c", "message"),
        ("", "c", "message"),
        (42, "c", "message"),
        ("q", "", "contact"),
        ("q", "   ", "contact"),
        ("q", None, "contact"),
        ("q", ["c"], "contact"),
    ])
    async def test_rejections(self, store: SnapshotStore, message, contact, reason) -> None:
        with pytest.raises(InquiryValidationError) as exc_info:
            await store.submit_inquiry(message, contact)
        assert f'"{reason}"' in exc_info.value.reason
        assert await store.inquiries() == []

    def test_inquiry_is_immutable(self) -> None:
        inquiry = Inquiry.from_submission("q", "c")
        with pytest.raises(Exception):
            inquiry.message = "changed"
