"""
Tests for report date anchors and the query table's date ranges.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from analytics_api.services.aggregator import build_queries
from analytics_api.services.date_ranges import (
    ReportDates,
    format_date,
    months_before,
    one_year_before,
    resolve_date,
)


class TestOneYearBefore:
    def test_regular_day(self):
        now = datetime(2026, 10, 17, 21, 37, tzinfo=timezone.utc)
        assert one_year_before(now) == datetime(2025, 10, 17, 21, 37, tzinfo=timezone.utc)

    def test_leap_day_maps_to_feb_28(self):
        now = datetime(2024, 2, 29, 8, 0, tzinfo=timezone.utc)
        assert one_year_before(now) == datetime(2023, 2, 28, 8, 0, tzinfo=timezone.utc)

    def test_keeps_time_of_day(self):
        now = datetime(2026, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
        assert one_year_before(now).time() == now.time()


class TestMonthsBefore:
    def test_same_year(self):
        assert months_before(date(2026, 10, 17), 6) == date(2026, 4, 17)

    def test_crosses_year(self):
        assert months_before(date(2026, 3, 15), 6) == date(2025, 9, 15)

    def test_clamps_to_month_end(self):
        assert months_before(date(2026, 8, 31), 6) == date(2026, 2, 28)


class TestResolveDate:
    def test_sentinels(self):
        today = date(2026, 10, 17)
        assert resolve_date("today", today) == today
        assert resolve_date("yesterday", today) == date(2026, 10, 16)
        assert resolve_date("30daysAgo", today) == date(2026, 9, 17)

    def test_iso_date(self):
        assert resolve_date("2020-01-01", date(2026, 10, 17)) == date(2020, 1, 1)

    def test_unknown_sentinel_raises(self):
        with pytest.raises(ValueError):
            resolve_date("6monthsAgo", date(2026, 10, 17))


class TestReportDates:
    def test_month_start(self):
        dates = ReportDates.at(datetime(2026, 10, 17, 12, tzinfo=timezone.utc))
        assert dates.month_start == date(2026, 10, 1)
        assert format_date(dates.month_start) == "2026-10-01"

    def test_defaults_to_property_zone_now(self):
        dates = ReportDates.at()
        assert dates.now.utcoffset() == timedelta(hours=-5)

    def test_month_end_evening_in_bogota(self):
        dates = ReportDates.at(datetime(2026, 11, 1, 4, 30, tzinfo=timezone.utc))
        assert dates.today == date(2026, 10, 31)
        assert dates.month_start == date(2026, 10, 1)
        assert dates.six_months_ago == date(2026, 4, 30)

    def test_other_zone(self):
        dates = ReportDates.at(datetime(2026, 11, 1, 4, 30, tzinfo=timezone.utc), tz="UTC")
        assert dates.month_start == date(2026, 11, 1)


@pytest.mark.parametrize("now", [
    datetime(2026, 10, 17, 21, 37, tzinfo=timezone.utc),
    datetime(2024, 2, 29, 0, 0, tzinfo=timezone.utc),
    datetime(2026, 1, 1, 0, 0, tzinfo=timezone.utc),
    datetime(2026, 3, 31, 23, 59, tzinfo=timezone.utc),
    datetime(2026, 11, 1, 4, 30, tzinfo=timezone.utc),
    datetime(2026, 3, 1, 2, 0, tzinfo=timezone.utc),
])
def test_every_query_range_is_ordered(now):
    dates = ReportDates.at(now)
    for spec in build_queries(dates):
        start = resolve_date(spec.start_date, dates.today)
        end = resolve_date(spec.end_date, dates.today)
        assert start <= end, spec.name
