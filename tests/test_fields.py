"""Tests for the declarative field-alias tables."""

from datetime import datetime, timezone

from balloon_quake.adapters import fields
from balloon_quake.adapters.fields import FieldAliases, coerce_float, coerce_timestamp, key


class TestCoerceFloat:
    def test_numbers_and_numeric_strings(self) -> None:
        assert coerce_float(3) == 3.0
        assert coerce_float(2.5) == 2.5
        assert coerce_float(" -12.75 ") == -12.75
        assert coerce_float("1e3") == 1000.0

    def test_absent_values(self) -> None:
        for value in (None, "", "abc", True, False, [1], {"a": 1}, float("nan"), float("inf"), "NaN"):
            assert coerce_float(value) is None, value


class TestCoerceTimestamp:
    def test_iso_string_with_offset(self) -> None:
        ts = coerce_timestamp("2026-01-01T14:00:00+02:00")
        assert ts == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_naive_string_is_utc(self) -> None:
        ts = coerce_timestamp("2026-01-01 12:00:00")
        assert ts.tzinfo is not None
        assert ts.hour == 12

    def test_epoch_millis(self) -> None:
        assert coerce_timestamp(1767268800000) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_epoch_seconds(self) -> None:
        assert coerce_timestamp(1767268800) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_unparseable(self) -> None:
        for value in (None, "", "not a date", True, {"t": 1}):
            assert coerce_timestamp(value) is None, value


class TestFieldAliases:
    def test_priority_order(self) -> None:
        aliases = FieldAliases("x", (key("a"), key("b")))
        assert aliases.first_number({"a": "1", "b": 2}) == 1.0
        assert aliases.first_number({"a": "junk", "b": 2}) == 2.0
        assert aliases.first_number({}) is None

    def test_first_truthy_skips_falsy(self) -> None:
        assert fields.ENTITY_ID.first_truthy({"id": "", "name": "wb-3"}) == "wb-3"

    def test_latitude_from_nested_mapping(self) -> None:
        record = {"position": {"latitude": 10.5, "lng": 20.5}}
        assert fields.LATITUDE.first_number(record) == 10.5
        assert fields.LONGITUDE.first_number(record) == 20.5

    def test_coordinate_pair_is_longitude_first(self) -> None:
        record = {"coordinates": [20.5, 10.5]}
        assert fields.LATITUDE.first_number(record) == 10.5
        assert fields.LONGITUDE.first_number(record) == 20.5

    def test_flat_fields_win_over_nested(self) -> None:
        record = {"lat": 1.0, "lon": 2.0, "location": {"lat": 9.0, "lon": 9.0}}
        assert fields.LATITUDE.first_number(record) == 1.0
        assert fields.LONGITUDE.first_number(record) == 2.0
