"""
GA4 Data API client — service-account auth, request building, async execution.

The Google client is synchronous (gRPC), so each report runs in the default
executor and can be awaited alongside the others.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from google.analytics.data_v1beta import BetaAnalyticsDataClient
from google.analytics.data_v1beta.types import (
    DateRange,
    Dimension,
    Metric,
    OrderBy,
    RunReportRequest,
    RunReportResponse,
)
from google.oauth2 import service_account

from analytics_api.config import Settings, settings as default_settings
from analytics_api.services.errors import CredentialsError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/analytics.readonly"]


# ── query specs ─────────────────────────────────────────

@dataclass(frozen=True)
class OrderRule:
    """Sort rule on either a metric or a dimension."""

    field: str
    on_metric: bool
    desc: bool = False

    @classmethod
    def metric(cls, name: str, desc: bool = True) -> "OrderRule":
        return cls(field=name, on_metric=True, desc=desc)

    @classmethod
    def dimension(cls, name: str, desc: bool = False) -> "OrderRule":
        return cls(field=name, on_metric=False, desc=desc)


@dataclass(frozen=True)
class QuerySpec:
    """One GA4 report: date range, dimensions, metrics, optional limit/order."""

    name: str
    start_date: str
    end_date: str
    metrics: tuple[str, ...]
    dimensions: tuple[str, ...] = ()
    limit: int | None = None
    order_bys: tuple[OrderRule, ...] = ()


def build_request(property_resource: str, spec: QuerySpec) -> RunReportRequest:
    """Translate a ``QuerySpec`` into a ``RunReportRequest``."""
    request = RunReportRequest(
        property=property_resource,
        date_ranges=[DateRange(start_date=spec.start_date, end_date=spec.end_date)],
        dimensions=[Dimension(name=d) for d in spec.dimensions],
        metrics=[Metric(name=m) for m in spec.metrics],
    )
    if spec.limit is not None:
        request.limit = spec.limit

    order_bys = []
    for rule in spec.order_bys:
        if rule.on_metric:
            order_bys.append(
                OrderBy(metric=OrderBy.MetricOrderBy(metric_name=rule.field), desc=rule.desc)
            )
        else:
            order_bys.append(
                OrderBy(dimension=OrderBy.DimensionOrderBy(dimension_name=rule.field), desc=rule.desc)
            )
    if order_bys:
        request.order_bys = order_bys
    return request


# ── client ──────────────────────────────────────────────

def credentials_from_settings(cfg: Settings) -> service_account.Credentials:
    """Build service-account credentials from the email + PEM key env pair."""
    if not cfg.has_credentials:
        raise CredentialsError("GOOGLE_CLIENT_EMAIL and GOOGLE_PRIVATE_KEY must be set")

    info = {
        "type": "service_account",
        "client_email": cfg.google_client_email,
        "private_key": cfg.private_key_pem,
        "token_uri": cfg.google_token_uri,
    }
    try:
        return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    except ValueError as e:
        raise CredentialsError(f"Invalid service-account credentials: {e}") from e


class GA4Client:
    """Thin async facade over ``BetaAnalyticsDataClient`` for one property."""

    def __init__(self, data_client: BetaAnalyticsDataClient, property_resource: str):
        self._client = data_client
        self.property_resource = property_resource

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> "GA4Client":
        cfg = cfg or default_settings
        credentials = credentials_from_settings(cfg)
        client = BetaAnalyticsDataClient(credentials=credentials)
        logger.info(
            "GA4 client ready for %s (%s)", cfg.property_resource, cfg.google_client_email
        )
        return cls(client, cfg.property_resource)

    async def run_report(self, spec: QuerySpec) -> RunReportResponse:
        """Run one report in the default executor."""
        request = build_request(self.property_resource, spec)
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(None, self._client.run_report, request)
        logger.debug("GA4 %s returned %d rows", spec.name, len(response.rows))
        return response
