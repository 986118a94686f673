# tests/test_timestamps.py
from __future__ import annotations

from datetime import datetime

import pytest

from betlog.ingest.timestamps import (
    MalformedTimestamp,
    format_timestamp,
    looks_like_timestamp,
    parse_timestamp,
    to_24_hour,
)


def test_parse_reference_timestamp() -> None:
    dt = parse_timestamp("9 Feb 2025 @ 4:08pm")
    assert isinstance(dt, datetime)
    assert (dt.year, dt.month - 1, dt.day, dt.hour, dt.minute) == (2025, 1, 9, 16, 8)


@pytest.mark.parametrize(
    ("hour", "meridiem", "expected"),
    [(12, "am", 0), (12, "pm", 12), (1, "am", 1), (11, "pm", 23), (1, "PM", 13)],
)
def test_to_24_hour(hour: int, meridiem: str, expected: int) -> None:
    assert to_24_hour(hour, meridiem) == expected


def test_month_is_case_insensitive_first_three_letters() -> None:
    assert parse_timestamp("1 SEPT 2024 @ 9:00AM") == datetime(2024, 9, 1, 9, 0)
    assert parse_timestamp("31 december 2024 @ 11:59pm") == datetime(2024, 12, 31, 23, 59)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "2025-02-09 16:08",
        "9 Foo 2025 @ 4:08pm",
        "31 Feb 2025 @ 4:08pm",
        "9 Feb 2025 @ 13:08pm",
        "9 Feb 2025 @ 0:08am",
        "9 Feb 2025 @ 4:75pm",
    ],
)
def test_malformed_is_a_value_not_an_exception(text: str) -> None:
    out = parse_timestamp(text)
    assert isinstance(out, MalformedTimestamp)
    assert out.text == text
    assert out.reason
    assert not out


def test_none_is_malformed() -> None:
    assert isinstance(parse_timestamp(None), MalformedTimestamp)


def test_structural_check_ignores_ranges() -> None:
    # shape matches even though the day does not exist
    assert looks_like_timestamp("31 Feb 2025 @ 4:08pm")
    assert looks_like_timestamp(" 9 Feb 2025 @ 4:08pm ")
    assert not looks_like_timestamp("Patrick Mahomes - Passing Yards")
    assert not looks_like_timestamp("")
    assert not looks_like_timestamp(None)


@pytest.mark.parametrize(
    "dt",
    [
        datetime(2025, 2, 9, 16, 8),
        datetime(2024, 12, 1, 0, 0),
        datetime(2023, 7, 15, 12, 30),
        datetime(2022, 1, 31, 23, 59),
    ],
)
def test_format_then_parse_is_identity(dt: datetime) -> None:
    assert parse_timestamp(format_timestamp(dt)) == dt


def test_format_timestamp_text() -> None:
    assert format_timestamp(datetime(2025, 2, 9, 16, 8)) == "9 Feb 2025 @ 4:08pm"
    assert format_timestamp(datetime(2025, 2, 9, 0, 5)) == "9 Feb 2025 @ 12:05am"
