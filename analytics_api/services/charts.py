"""
Chart.js configurations for the dashboard and the board that owns them.

A canvas holds at most one live chart: drawing on a canvas that already
has one destroys the old chart first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional

from analytics_api.services.formatting import format_day_label


BRAND = "#069681"
PALETTE = ["#069681", "#17a2b8", "#ffc107", "#dc3545", "#6c757d", "#f8f9fa"]

VISITS_CANVAS = "visitsChart"
DEVICES_CANVAS = "devicesChart"
BROWSERS_CANVAS = "browsersChart"
MONTHLY_TREND_CANVAS = "monthlyTrendChart"
CANVASES = (VISITS_CANVAS, DEVICES_CANVAS, BROWSERS_CANVAS, MONTHLY_TREND_CANVAS)


@dataclass
class Chart:
    canvas_id: str
    config: dict[str, Any]
    destroyed: bool = False

    def destroy(self) -> None:
        self.destroyed = True


@dataclass
class ChartBoard:
    """Live charts keyed by canvas id, limited to the canvases on the page."""

    canvases: frozenset[str]
    charts: dict[str, Chart] = field(default_factory=dict)

    def draw(self, canvas_id: str, config: dict[str, Any]) -> Optional[Chart]:
        if canvas_id not in self.canvases:
            return None
        existing = self.charts.get(canvas_id)
        if existing is not None:
            existing.destroy()
        chart = Chart(canvas_id=canvas_id, config=config)
        self.charts[canvas_id] = chart
        return chart

    def live(self) -> list[Chart]:
        return [c for c in self.charts.values() if not c.destroyed]


def _responsive(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    options: dict[str, Any] = {"responsive": True, "maintainAspectRatio": False}
    if extra:
        options.update(extra)
    return options


def _day_label(value: str, locale: str) -> str:
    try:
        return format_day_label(date.fromisoformat(value), locale)
    except ValueError:
        return value


def daily_visits_chart(daily: Iterable[dict], locale: str) -> dict[str, Any]:
    daily = list(daily or [])
    return {
        "type": "line",
        "data": {
            "labels": [_day_label(str(item.get("date", "")), locale) for item in daily],
            "datasets": [{
                "label": "Visitas diarias",
                "data": [item.get("visits", 0) for item in daily],
                "borderColor": BRAND,
                "backgroundColor": "rgba(6, 150, 129, 0.1)",
                "fill": True,
                "tension": 0.3,
            }],
        },
        "options": _responsive(),
    }


def devices_chart(devices: dict[str, int]) -> dict[str, Any]:
    devices = devices or {}
    return {
        "type": "doughnut",
        "data": {
            "labels": list(devices.keys()),
            "datasets": [{"data": list(devices.values()), "backgroundColor": PALETTE[:3]}],
        },
        "options": _responsive(),
    }


def browsers_chart(browsers: dict[str, int]) -> dict[str, Any]:
    browsers = browsers or {}
    return {
        "type": "pie",
        "data": {
            "labels": list(browsers.keys()),
            "datasets": [{"data": list(browsers.values()), "backgroundColor": PALETTE}],
        },
        "options": _responsive(),
    }


def monthly_trend_chart(trend: Iterable[dict]) -> dict[str, Any]:
    trend = list(trend or [])
    return {
        "type": "bar",
        "data": {
            "labels": [str(item.get("period", "")) for item in trend],
            "datasets": [{
                "label": "Visitas mensuales",
                "data": [item.get("visits", 0) for item in trend],
                "backgroundColor": "rgba(6, 150, 129, 0.7)",
                "borderColor": BRAND,
                "borderWidth": 1,
            }],
        },
        "options": _responsive({"scales": {"y": {"beginAtZero": True}}}),
    }
