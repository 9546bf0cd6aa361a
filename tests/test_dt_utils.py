"""Tests for utils/dt_utils.py local calendar day helpers.

These functions have no Home Assistant dependency and run without hass.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from freezegun import freeze_time
import pytest

from custom_components.chemocare.utils import dt_utils


class TestParsing:
    """Test strict date and lenient time parsing."""

    def test_parse_iso_date(self) -> None:
        """A YYYY-MM-DD string becomes a date."""
        assert dt_utils.parse_iso_date("2025-01-20") == date(2025, 1, 20)
        assert dt_utils.parse_iso_date(" 2025-01-20 ") == date(2025, 1, 20)

    @pytest.mark.parametrize(
        "value",
        ["2025-1-20", "20-01-2025", "2025-02-30", "2025-01-20T10:00", "", None, 20250120],
    )
    def test_parse_iso_date_rejects_malformed(self, value) -> None:
        """Anything but a real YYYY-MM-DD date raises ValueError."""
        with pytest.raises(ValueError):
            dt_utils.parse_iso_date(value)

    def test_format_iso_date(self) -> None:
        """Dates and datetimes format as their calendar day."""
        assert dt_utils.format_iso_date(date(2025, 3, 9)) == "2025-03-09"
        assert dt_utils.format_iso_date(datetime(2025, 3, 9, 23, 59)) == "2025-03-09"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("08:30", (8, 30)),
            ("9", (9, 0)),
            ("9:xx", (9, 0)),
            ("  14:05 ", (14, 5)),
            ("", None),
            (None, None),
        ],
    )
    def test_parse_time_of_day(self, value, expected) -> None:
        """Missing or non-numeric components count as zero."""
        assert dt_utils.parse_time_of_day(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("08:00", True), ("23:59", True), ("8:00", False), ("24:00", False), ("ab:cd", False)],
    )
    def test_is_valid_time_of_day(self, value: str, expected: bool) -> None:
        """Only well formed 24h HH:MM values are valid."""
        assert dt_utils.is_valid_time_of_day(value) is expected


class TestDayArithmetic:
    """Test calendar day arithmetic."""

    def test_day_difference_ignores_time_of_day(self) -> None:
        """Whole calendar days are counted regardless of the clock."""
        assert dt_utils.day_difference(date(2025, 1, 1), date(2025, 1, 15)) == 14
        assert (
            dt_utils.day_difference(datetime(2025, 1, 1, 23, 0), datetime(2025, 1, 2, 1, 0))
            == 1
        )
        assert dt_utils.day_difference(date(2025, 1, 15), date(2025, 1, 1)) == -14

    def test_day_difference_across_dst(self) -> None:
        """A DST change does not turn a day into 23 or 25 hours."""
        assert dt_utils.day_difference(date(2025, 3, 29), date(2025, 3, 31)) == 2
        assert dt_utils.day_difference(date(2025, 10, 25), date(2025, 10, 27)) == 2

    def test_add_days_keeps_time_of_day(self) -> None:
        """Adding days to a datetime keeps its clock time."""
        assert dt_utils.add_days(date(2025, 12, 31), 1) == date(2026, 1, 1)
        assert dt_utils.add_days(datetime(2025, 1, 1, 8, 0), -1) == datetime(
            2024, 12, 31, 8, 0
        )

    def test_same_calendar_day(self) -> None:
        """A datetime and a date on the same day compare equal."""
        assert dt_utils.same_calendar_day(datetime(2025, 1, 1, 23, 0), date(2025, 1, 1))
        assert not dt_utils.same_calendar_day(date(2025, 1, 1), date(2025, 1, 2))

    def test_start_of_month(self) -> None:
        """The first of the month is returned as a date."""
        assert dt_utils.start_of_month(datetime(2024, 2, 29, 12, 0)) == date(2024, 2, 1)


class TestApplyTimeOfDay:
    """Test overlaying a time of day onto a date."""

    def test_without_time_returns_date(self) -> None:
        """No time keeps an all-day date."""
        assert dt_utils.apply_time_of_day(date(2025, 1, 1), None) == date(2025, 1, 1)
        assert dt_utils.apply_time_of_day(date(2025, 1, 1), "") == date(2025, 1, 1)

    def test_with_time_returns_naive_datetime(self) -> None:
        """A time makes a naive local datetime on that day."""
        result = dt_utils.apply_time_of_day(date(2025, 1, 1), "09:30")

        assert result == datetime(2025, 1, 1, 9, 30)
        assert result.tzinfo is None

    def test_out_of_range_rolls_over(self) -> None:
        """25:00 lands at 01:00 the next day."""
        assert dt_utils.apply_time_of_day(date(2025, 1, 1), "25:00") == datetime(
            2025, 1, 2, 1, 0
        )


class TestCurrentTime:
    """Test timezone aware "today" helpers."""

    @freeze_time("2025-01-15 23:30:00", tz_offset=0)
    def test_today_follows_timezone(self) -> None:
        """Late evening UTC is already tomorrow in Amsterdam."""
        assert dt_utils.dt_today_local(ZoneInfo("UTC")) == date(2025, 1, 15)
        assert dt_utils.dt_today_local(ZoneInfo("Europe/Amsterdam")) == date(2025, 1, 16)

    @freeze_time("2025-01-15 23:30:00", tz_offset=0)
    def test_now_is_naive_local(self) -> None:
        """The current time is returned as naive local wall-clock time."""
        now = dt_utils.dt_now_local(ZoneInfo("Europe/Amsterdam"))

        assert now.tzinfo is None
        assert now == datetime(2025, 1, 16, 0, 30)

    def test_default_timezone_roundtrip(self) -> None:
        """The default timezone can be replaced and restored."""
        original = dt_utils.get_default_timezone()
        try:
            dt_utils.set_default_timezone(ZoneInfo("Europe/Amsterdam"))
            assert dt_utils.get_default_timezone() == ZoneInfo("Europe/Amsterdam")
        finally:
            dt_utils.set_default_timezone(original)
