from datetime import date

import pytest

from tampayang.errors import ValidationError
from tampayang.statistics import (
    MapLevel,
    map_level,
    parse_optional_date,
    summary_range,
    validate_period,
)


@pytest.mark.parametrize("period", ["7d", "30d", "90d", "180d", "365d", "1y"])
def test_valid_periods_pass_through(period):
    assert validate_period(period) == period


def test_empty_period_defaults():
    assert validate_period("") == "30d"
    assert validate_period(None) == "30d"


@pytest.mark.parametrize("period", ["1d", "30", "2y", "7D"])
def test_invalid_period(period):
    with pytest.raises(ValidationError) as info:
        validate_period(period)
    assert info.value.field == "period"


def test_parse_optional_date():
    assert parse_optional_date("2024-02-29", "start_date") == date(2024, 2, 29)
    assert parse_optional_date("", "start_date") is None


@pytest.mark.parametrize("value", ["2024-1-05", "2024/01/05", "2023-02-29", "yesterday"])
def test_parse_optional_date_rejects(value):
    with pytest.raises(ValidationError) as info:
        parse_optional_date(value, "end_date")
    assert info.value.field == "end_date"
    assert info.value.message == "Invalid date format. Use YYYY-MM-DD"


def test_summary_range_defaults_to_today():
    today = date(2024, 5, 1)
    assert summary_range("", "", True, today) == (today, today)


def test_summary_range_keeps_given_dates_when_logged_in():
    today = date(2024, 5, 1)
    assert summary_range("2024-01-01", "2024-03-01", True, today) == (
        date(2024, 1, 1),
        date(2024, 3, 1),
    )


def test_summary_range_unknown_login_keeps_dates():
    today = date(2024, 5, 1)
    start, end = summary_range("2024-01-01", "2024-03-01", None, today)
    assert start == date(2024, 1, 1) and end == date(2024, 3, 1)


def test_summary_range_logged_out_forces_today():
    today = date(2024, 5, 1)
    assert summary_range("2024-01-01", "2024-03-01", False, today) == (today, today)


def test_summary_range_rejects_reversed():
    with pytest.raises(ValidationError):
        summary_range("2024-03-01", "2024-01-01", True, date(2024, 5, 1))


def test_map_level():
    assert map_level("", "") is MapLevel.ALL_REGENCIES
    assert map_level("r1", "") is MapLevel.DISTRICT
    assert map_level("", "d1") is MapLevel.VILLAGE
    assert map_level("r1", "d1") is MapLevel.DISTRICT