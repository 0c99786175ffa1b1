"""
Report Aggregator — seven GA4 queries in, one ``AnalyticsReport`` out.

Each aggregation:
  1. computes its date anchors from a single ``now``
  2. builds the fixed set of query specs
  3. runs them concurrently, one task per query, failing fast
  4. shapes the responses, coercing anything missing to zero
"""

from __future__ import annotations

import asyncio
import logging
import re
import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable

from analytics_api.config import Settings, settings as default_settings
from analytics_api.schemas import AnalyticsReport, DailyVisits, MonthlyVisits, TopPage
from analytics_api.services.date_ranges import (
    LAST_30_DAYS,
    TODAY,
    ReportDates,
    format_date,
)
from analytics_api.services.errors import ReportQueryError
from analytics_api.services.formatting import format_period
from analytics_api.services.ga4 import GA4Client, OrderRule, QuerySpec
from analytics_api.services.report_rows import (
    dimension_value,
    first_metric,
    metric_value,
    parse_count,
    rows_of,
)

logger = logging.getLogger("analytics.aggregator")

TOP_PAGES_LIMIT = 10
TOP_BROWSERS_LIMIT = 5

_GA4_DATE_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")


# ─────────────────────────────────────────────────────────────────────
# query table
# ─────────────────────────────────────────────────────────────────────

def build_queries(dates: ReportDates, epoch_start: str = "2020-01-01") -> list[QuerySpec]:
    """The seven independent report queries behind one dashboard."""
    year_ago = format_date(dates.one_year_ago)
    return [
        QuerySpec(
            name="totalVisits",
            start_date=epoch_start,
            end_date=TODAY,
            metrics=("totalUsers",),
        ),
        QuerySpec(
            name="monthlyVisits",
            start_date=format_date(dates.month_start),
            end_date=TODAY,
            metrics=("totalUsers",),
        ),
        QuerySpec(
            name="topPages",
            start_date=year_ago,
            end_date=TODAY,
            dimensions=("pagePath", "pageTitle"),
            metrics=("screenPageViews",),
            limit=TOP_PAGES_LIMIT,
            order_bys=(OrderRule.metric("screenPageViews", desc=True),),
        ),
        QuerySpec(
            name="devices",
            start_date=year_ago,
            end_date=TODAY,
            dimensions=("deviceCategory",),
            metrics=("sessions",),
        ),
        QuerySpec(
            name="browsers",
            start_date=year_ago,
            end_date=TODAY,
            dimensions=("browser",),
            metrics=("sessions",),
            limit=TOP_BROWSERS_LIMIT,
            order_bys=(OrderRule.metric("sessions", desc=True),),
        ),
        QuerySpec(
            name="dailyVisits",
            start_date=LAST_30_DAYS,
            end_date=TODAY,
            dimensions=("date",),
            metrics=("totalUsers",),
            order_bys=(OrderRule.dimension("date"),),
        ),
        QuerySpec(
            name="monthlyTrend",
            # GA4 has no "NmonthsAgo" sentinel
            start_date=format_date(dates.six_months_ago),
            end_date=TODAY,
            dimensions=("year", "month"),
            metrics=("totalUsers",),
            order_bys=(OrderRule.dimension("year"), OrderRule.dimension("month")),
        ),
    ]


# ─────────────────────────────────────────────────────────────────────
# shaping
# ─────────────────────────────────────────────────────────────────────

def ga4_date_to_iso(value: str) -> str:
    """``20250131`` → ``2025-01-31``; anything else is returned unchanged."""
    m = _GA4_DATE_RE.match(value)
    return f"{m.group(1)}-{m.group(2)}-{m.group(3)}" if m else value


def shape_top_pages(response: Any) -> list[TopPage]:
    pages = []
    for row in list(rows_of(response))[:TOP_PAGES_LIMIT]:
        pages.append(TopPage(
            path=dimension_value(row, 0) or "",
            title=dimension_value(row, 1) or "",
            visits=parse_count(metric_value(row, 0)),
        ))
    return pages


def shape_breakdown(response: Any, limit: int | None = None) -> dict[str, int]:
    """Dimension 0 → metric 0, in upstream order."""
    counts: dict[str, int] = {}
    for row in rows_of(response):
        if limit is not None and len(counts) >= limit:
            break
        key = dimension_value(row, 0)
        if key is None:
            continue
        counts[key] = parse_count(metric_value(row, 0))
    return counts


def shape_daily_visits(response: Any) -> list[DailyVisits]:
    return [
        DailyVisits(
            date=ga4_date_to_iso(dimension_value(row, 0) or ""),
            visits=parse_count(metric_value(row, 0)),
        )
        for row in rows_of(response)
    ]


def shape_monthly_trend(response: Any, locale: str = "es") -> list[MonthlyVisits]:
    trend = []
    for row in rows_of(response):
        year = parse_count(dimension_value(row, 0))
        month = parse_count(dimension_value(row, 1))
        if not 1 <= month <= 12:
            continue
        trend.append(MonthlyVisits(
            period=format_period(year, month, locale),
            visits=parse_count(metric_value(row, 0)),
        ))
    return trend


def assemble_report(
    responses: dict[str, Any],
    now: datetime,
    locale: str = "es",
) -> AnalyticsReport:
    """Build the report from query-name → GA4 response. Missing entries count as empty."""
    get = responses.get
    return AnalyticsReport(
        total_visits=first_metric(get("totalVisits")),
        monthly_visits=first_metric(get("monthlyVisits")),
        top_pages=shape_top_pages(get("topPages")),
        devices=shape_breakdown(get("devices")),
        browsers=shape_breakdown(get("browsers"), limit=TOP_BROWSERS_LIMIT),
        daily_visits=shape_daily_visits(get("dailyVisits")),
        monthly_trend=shape_monthly_trend(get("monthlyTrend"), locale),
        last_update=now.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
    )


# ─────────────────────────────────────────────────────────────────────
# aggregator
# ─────────────────────────────────────────────────────────────────────

class ReportAggregator:
    """Runs the query table against one GA4 client and shapes the result."""

    def __init__(self, client: GA4Client, cfg: Settings | None = None):
        self._client = client
        self._settings = cfg or default_settings

    async def _run_all(self, specs: list[QuerySpec]) -> dict[str, Any]:
        """Fan out one task per spec; the first failure cancels the rest."""
        tasks = {
            asyncio.create_task(self._client.run_report(spec), name=f"ga4:{spec.name}"): spec
            for spec in specs
        }
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)

        failed = [t for t in done if not t.cancelled() and t.exception() is not None]
        if failed:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
            first = failed[0]
            raise ReportQueryError(tasks[first].name, first.exception()) from first.exception()

        return {tasks[t].name: t.result() for t in done}

    async def aggregate(self, now: datetime | None = None) -> AnalyticsReport:
        dates = ReportDates.at(now, self._settings.report_timezone)
        specs = build_queries(dates, self._settings.ga4_epoch_start)

        started = time.monotonic()
        responses = await self._run_all(specs)
        report = assemble_report(responses, dates.now, self._settings.report_locale)

        logger.info(
            "📊 Aggregated %d GA4 reports in %.2fs (total=%d, month=%d)",
            len(specs),
            time.monotonic() - started,
            report.total_visits,
            report.monthly_visits,
        )
        return report


class AggregatorProvider:
    """Builds the GA4 client on first use and reuses it for the process lifetime."""

    def __init__(
        self,
        cfg: Settings | None = None,
        client_factory: Callable[[Settings], GA4Client] | None = None,
    ):
        self._settings = cfg or default_settings
        self._client_factory = client_factory or GA4Client.from_settings
        self._aggregator: ReportAggregator | None = None
        self._lock = threading.Lock()

    def get(self) -> ReportAggregator:
        if self._aggregator is None:
            with self._lock:
                if self._aggregator is None:
                    client = self._client_factory(self._settings)
                    self._aggregator = ReportAggregator(client, self._settings)
        return self._aggregator
