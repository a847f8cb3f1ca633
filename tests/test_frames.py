"""Tests for the hourly frame loader."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Callable

import httpx
import pytest

from balloon_quake.ingest.frames import fetch_frame, frame_url, load_frames

BASE_URL = "https://wind.test/treasure"
_NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _hour_of(request: httpx.Request) -> int:
    return int(request.url.path.rsplit("/", 1)[-1].split(".")[0])


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestFrameUrl:
    def test_zero_padded(self) -> None:
        assert frame_url(BASE_URL, 3) == "https://wind.test/treasure/03.json"
        assert frame_url(BASE_URL + "/", 17) == "https://wind.test/treasure/17.json"


class TestFetchFrame:
    @pytest.mark.asyncio
    async def test_decodes_payload_and_stamps_nominal_time(self) -> None:
        async with _client(lambda req: httpx.Response(200, json=[[1, 2, 3], [4, 5, 6]])) as client:
            frame = await fetch_frame(client, BASE_URL, 5, _NOW)
        assert frame.hour_tag == "05"
        assert frame.timestamp == _NOW - timedelta(hours=5)
        assert frame.record_count == 2
        assert frame.raw == [[1, 2, 3], [4, 5, 6]]

    @pytest.mark.asyncio
    async def test_lenient_body(self) -> None:
        body = '[[1, 2, NaN], [4, 5, 6],]'
        async with _client(lambda req: httpx.Response(200, text=body)) as client:
            frame = await fetch_frame(client, BASE_URL, 0, _NOW)
        assert frame.raw == [[1, 2, None], [4, 5, 6]]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(404),
        httpx.Response(500, text="boom"),
        httpx.Response(200, text=""),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, text="null"),
    ])
    async def test_failures_yield_none(self, response: httpx.Response) -> None:
        async with _client(lambda req: response) as client:
            assert await fetch_frame(client, BASE_URL, 0, _NOW) is None

    @pytest.mark.asyncio
    async def test_deeply_nested_body_yields_none(self) -> None:
        deep = "[" * 200_000 + "]" * 200_000
        async with _client(lambda req: httpx.Response(200, text=deep)) as client:
            assert await fetch_frame(client, BASE_URL, 0, _NOW) is None

    @pytest.mark.asyncio
    async def test_timeout_yields_none(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        async with _client(handler) as client:
            assert await fetch_frame(client, BASE_URL, 0, _NOW) is None


class TestLoadFrames:
    @pytest.mark.asyncio
    async def test_fetches_every_hour_sorted_oldest_first(self) -> None:
        seen: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            hour = _hour_of(request)
            seen.append(hour)
            return httpx.Response(200, json=[[hour, hour]])

        async with _client(handler) as client:
            frames = await load_frames(client, BASE_URL, lookback_hours=24, now=_NOW)

        assert sorted(seen) == list(range(24))
        assert len(frames) == 24
        assert [f.hour_tag for f in frames][:2] == ["23", "22"]
        assert frames[-1].hour_tag == "00"
        assert all(a.timestamp < b.timestamp for a, b in zip(frames, frames[1:]))

    @pytest.mark.asyncio
    async def test_failed_hours_are_excluded(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            hour = _hour_of(request)
            if hour % 2:
                return httpx.Response(502)
            return httpx.Response(200, content=json.dumps({"balloons": []}).encode())

        async with _client(handler) as client:
            frames = await load_frames(client, BASE_URL, lookback_hours=6, now=_NOW)
        assert [f.hour_tag for f in frames] == ["04", "02", "00"]

    @pytest.mark.asyncio
    async def test_all_failures_yield_empty_list(self) -> None:
        async with _client(lambda req: httpx.Response(500)) as client:
            assert await load_frames(client, BASE_URL, lookback_hours=3, now=_NOW) == []

    @pytest.mark.asyncio
    async def test_lookback_is_capped_at_24(self) -> None:
        seen: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(_hour_of(request))
            return httpx.Response(200, json=[])

        async with _client(handler) as client:
            await load_frames(client, BASE_URL, lookback_hours=48, now=_NOW)
        assert max(seen) == 23

    @pytest.mark.asyncio
    async def test_deeply_nested_hour_does_not_sink_the_batch(self) -> None:
        deep = "[" * 200_000 + "]" * 200_000

        def handler(request: httpx.Request) -> httpx.Response:
            hour = _hour_of(request)
            if hour == 1:
                return httpx.Response(200, text=deep)
            return httpx.Response(200, json={"balloons": [{"id": f"wb-{hour}", "lat": 1, "lon": 2}]})

        async with _client(handler) as client:
            frames = await load_frames(client, BASE_URL, lookback_hours=4, now=_NOW)
        assert [f.hour_tag for f in frames] == ["03", "02", "00"]

    @pytest.mark.asyncio
    async def test_unexpected_error_in_one_hour_is_isolated(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if _hour_of(request) == 2:
                raise RuntimeError("transport blew up")
            return httpx.Response(200, json=[[1, 2, 3]])

        async with _client(handler) as client:
            frames = await load_frames(client, BASE_URL, lookback_hours=3, now=_NOW)
        assert [f.hour_tag for f in frames] == ["01", "00"]
