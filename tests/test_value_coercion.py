"""
tests/test_value_coercion.py

Pytest unit tests for scalar coercion. Pure functions, no I/O.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from app.mappers.value_coercion import (
    coerce_count,
    coerce_iso_date,
    coerce_number,
    iso_to_epoch_ms,
)


class TestCoerceNumber:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (12, 12.0),
            (12.5, 12.5),
            ("12.5", 12.5),
            ("  7 ", 7.0),
            (Decimal("3.25"), 3.25),
            (-4, -4.0),
        ],
    )
    def test_numeric_values_pass_through(self, value: object, expected: float) -> None:
        assert coerce_number(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "abc", "12abc", {"a": 1}, [1, 2], True, "nan", "inf", float("nan")],
    )
    def test_unusable_values_become_zero(self, value: object) -> None:
        assert coerce_number(value) == 0.0

    def test_integer_too_large_for_float_becomes_zero(self) -> None:
        assert coerce_number(10**400) == 0.0
        assert coerce_count(-(10**400)) == 0

    def test_count_truncates_to_int(self) -> None:
        assert coerce_count("10.9") == 10
        assert isinstance(coerce_count(3.0), int)
        assert coerce_count(None) == 0


class TestCoerceIsoDate:
    def test_direct_iso_string(self) -> None:
        assert coerce_iso_date("2023-03-15") == "2023-03-15T00:00:00.000Z"

    def test_offset_is_normalized_to_utc(self) -> None:
        assert coerce_iso_date("2023-01-15T10:30:00+02:00") == "2023-01-15T08:30:00.000Z"

    def test_zulu_suffix(self) -> None:
        assert coerce_iso_date("2022-12-01T00:00:00Z") == "2022-12-01T00:00:00.000Z"

    @pytest.mark.parametrize("value", ["2023-01", "2023-1"])
    def test_year_month_pattern_is_first_of_month_utc(self, value: str) -> None:
        assert coerce_iso_date(value) == "2023-01-01T00:00:00.000Z"

    def test_permissive_fallback(self) -> None:
        assert coerce_iso_date("2023/03/15") == "2023-03-15T00:00:00.000Z"

    def test_date_and_datetime_objects(self) -> None:
        assert coerce_iso_date(date(2023, 5, 1)) == "2023-05-01T00:00:00.000Z"
        assert coerce_iso_date(datetime(2023, 5, 1, 12)) == "2023-05-01T12:00:00.000Z"

    @pytest.mark.parametrize("value", [None, "", "   ", "garbage", True, "now", "today", " Today "])
    def test_unresolvable_values_signal_no_date(self, value: object) -> None:
        assert coerce_iso_date(value) is None

    def test_date_leaving_utc_range_signals_no_date(self) -> None:
        assert coerce_iso_date("0001-01-01T00:00:00+01:00") is None
        assert coerce_iso_date("9999-12-31T23:00:00-05:00") is None

    def test_epoch_ms_round_trip(self) -> None:
        assert iso_to_epoch_ms("1970-01-02T00:00:00.000Z") == 86_400_000
