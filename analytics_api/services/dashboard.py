"""
Dashboard Renderer — one fetch of the analytics report, painted into HTML.

The page layout lists which elements exist; anything not on the page is
skipped without affecting the rest. Fetch or paint failures never escape
``DashboardRenderer.load``: they become the error panel instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo

import aiohttp
from jinja2 import Environment, FileSystemLoader, select_autoescape

from analytics_api.config import settings
from analytics_api.services import charts
from analytics_api.services.formatting import (
    format_number,
    format_timestamp,
    month_name,
)

logger = logging.getLogger("analytics.dashboard")

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

NO_TOP_PAGES = "No hay datos de páginas más visitadas."

# ─── Page elements ─────────────────────────────────────────────────────
LOADING = "loading"
ERROR_MESSAGE = "errorMessage"
LAST_UPDATE = "lastUpdate"
TOTAL_VISITS = "totalVisits"
MONTHLY_VISITS = "monthlyVisits"
TOP_PAGES_LIST = "topPagesList"
CURRENT_MONTH = "currentMonth"
CURRENT_YEAR = "currentYear"

FULL_LAYOUT = frozenset({
    LOADING, ERROR_MESSAGE, LAST_UPDATE, TOTAL_VISITS, MONTHLY_VISITS,
    TOP_PAGES_LIST, CURRENT_MONTH, CURRENT_YEAR, *charts.CANVASES,
})


class DashboardFetchError(Exception):
    """The analytics endpoint answered with a non-success status."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


def status_message(status: int) -> str:
    return f"El servidor respondió con el estado {status}"


async def fetch_report(url: str, timeout_s: int = 30) -> dict[str, Any]:
    """GET the analytics report. Non-2xx raises ``DashboardFetchError``."""
    timeout = aiohttp.ClientTimeout(total=timeout_s)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(url) as resp:
            if resp.status < 200 or resp.status >= 300:
                try:
                    body = await resp.json(content_type=None)
                except ValueError:
                    body = {}
                details = body.get("details") if isinstance(body, dict) else None
                raise DashboardFetchError(details or status_message(resp.status), resp.status)
            return await resp.json(content_type=None)


# ─── View state ────────────────────────────────────────────────────────

@dataclass
class TopPageLink:
    href: str
    title: str
    visits: str


@dataclass
class DashboardView:
    """Everything the template needs; ``None`` means the element stays untouched."""

    layout: frozenset[str]
    loading: bool = True
    error: Optional[str] = None
    last_update: Optional[str] = None
    total_visits: Optional[str] = None
    monthly_visits: Optional[str] = None
    current_month: Optional[str] = None
    current_year: Optional[str] = None
    top_pages: Optional[list[TopPageLink]] = None
    top_pages_placeholder: Optional[str] = None
    board: charts.ChartBoard = field(init=False)

    def __post_init__(self) -> None:
        self.board = charts.ChartBoard(canvases=frozenset(self.layout) & set(charts.CANVASES))

    def has(self, element_id: str) -> bool:
        return element_id in self.layout

    def show_error(self, message: str) -> None:
        if self.has(LOADING):
            self.loading = False
        if self.has(ERROR_MESSAGE):
            self.error = message


def page_href(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 timestamp, naive values taken as UTC; ``None`` if unusable."""
    if not isinstance(value, str):
        return None
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


# ─── Renderer ──────────────────────────────────────────────────────────

class DashboardRenderer:
    """Fetches the report once and paints a ``DashboardView``."""

    def __init__(
        self,
        api_url: str | None = None,
        locale: str | None = None,
        layout: frozenset[str] = FULL_LAYOUT,
        timeout_s: int | None = None,
        report_timezone: str | None = None,
    ):
        self.api_url = api_url or settings.dashboard_api_url
        self.locale = locale or settings.dashboard_locale
        self.layout = frozenset(layout)
        self.timeout_s = timeout_s or settings.dashboard_fetch_timeout
        self.zone = ZoneInfo(report_timezone or settings.report_timezone)

    async def load(self, now: datetime | None = None) -> DashboardView:
        view = DashboardView(layout=self.layout)
        try:
            data = await fetch_report(self.api_url, self.timeout_s)
            self.paint(view, data, now or datetime.now(self.zone))
        except Exception as e:
            logger.error("Error al obtener datos de analíticas: %s", e)
            view.show_error(str(e) or e.__class__.__name__)
        return view

    def paint(self, view: DashboardView, data: dict[str, Any], now: datetime) -> None:
        now = now.astimezone(self.zone)
        if view.has(LOADING):
            view.loading = False
        updated = _parse_timestamp(data.get("lastUpdate"))
        if view.has(LAST_UPDATE) and updated is not None:
            stamp = format_timestamp(updated.astimezone(self.zone), self.locale)
            view.last_update = f"Actualizado: {stamp}"

        if view.has(TOTAL_VISITS):
            view.total_visits = format_number(data.get("totalVisits") or 0, self.locale)
        if view.has(MONTHLY_VISITS):
            view.monthly_visits = format_number(data.get("monthlyVisits") or 0, self.locale)
        if view.has(CURRENT_MONTH):
            view.current_month = month_name(now.month - 1, self.locale).capitalize()
        if view.has(CURRENT_YEAR):
            view.current_year = str(now.year)

        self.paint_top_pages(view, data.get("topPages"))

        view.board.draw(charts.VISITS_CANVAS, charts.daily_visits_chart(data.get("dailyVisits"), self.locale))
        view.board.draw(charts.DEVICES_CANVAS, charts.devices_chart(data.get("devices")))
        view.board.draw(charts.BROWSERS_CANVAS, charts.browsers_chart(data.get("browsers")))
        view.board.draw(charts.MONTHLY_TREND_CANVAS, charts.monthly_trend_chart(data.get("monthlyTrend")))

    def paint_top_pages(self, view: DashboardView, pages: Optional[list[dict]]) -> None:
        if not view.has(TOP_PAGES_LIST):
            return
        if not pages:
            view.top_pages = None
            view.top_pages_placeholder = NO_TOP_PAGES
            return
        view.top_pages_placeholder = None
        view.top_pages = [
            TopPageLink(
                href=page_href(str(page.get("path", ""))),
                title=str(page.get("title", "")),
                visits=format_number(page.get("visits") or 0, self.locale),
            )
            for page in pages
        ]


def _get_jinja_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_html(view: DashboardView) -> str:
    template = _get_jinja_env().get_template("dashboard.html")
    return template.render(view=view, charts=view.board.live())
