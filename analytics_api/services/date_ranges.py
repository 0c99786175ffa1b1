"""
Date anchors for the dashboard reports.

GA4 accepts ``YYYY-MM-DD`` dates plus the relative sentinels ``today``,
``yesterday`` and ``NdaysAgo``. Everything else is computed here from a
single ``now`` so that all seven queries of one aggregation agree.
``now`` is taken in the property's reporting zone, the same calendar GA4
uses for ``today``.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

TODAY = "today"
LAST_30_DAYS = "30daysAgo"

_DAYS_AGO_RE = re.compile(r"^(\d+)daysAgo$")


def format_date(value: date | datetime) -> str:
    """Format as ``YYYY-MM-DD``."""
    return value.strftime("%Y-%m-%d")


def months_before(moment: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to month end."""
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def one_year_before(moment: datetime) -> datetime:
    """Same instant one calendar year earlier (Feb 29 becomes Feb 28)."""
    try:
        return moment.replace(year=moment.year - 1)
    except ValueError:
        return moment.replace(year=moment.year - 1, day=28)


def resolve_date(value: str, today: date) -> date:
    """Turn a GA4 date expression into a concrete calendar date."""
    if value == TODAY:
        return today
    if value == "yesterday":
        return today - timedelta(days=1)
    m = _DAYS_AGO_RE.match(value)
    if m:
        return today - timedelta(days=int(m.group(1)))
    return date.fromisoformat(value)


@dataclass(frozen=True)
class ReportDates:
    """All date-range endpoints used by one aggregation."""

    now: datetime
    one_year_ago: datetime
    month_start: date
    six_months_ago: date

    @classmethod
    def at(cls, now: datetime | None = None, tz: str = "America/Bogota") -> "ReportDates":
        zone = ZoneInfo(tz)
        now = now.astimezone(zone) if now else datetime.now(zone)
        today = now.date()
        return cls(
            now=now,
            one_year_ago=one_year_before(now),
            month_start=today.replace(day=1),
            six_months_ago=months_before(today, 6),
        )

    @property
    def today(self) -> date:
        return self.now.date()
