"""
API Routes — analytics report (GET + CORS preflight), health.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response

from analytics_api.config import settings
from analytics_api.schemas import ErrorResponse, HealthResponse
from analytics_api.services.aggregator import AggregatorProvider

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "1.0.0"
GENERIC_ERROR = "Failed to fetch analytics data"

REPORT_PATHS = ("/get-analytics", "/.netlify/functions/get-analytics")


def cors_headers() -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.cors_allow_origin,
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Access-Control-Max-Age": "86400",
    }


def _json(status_code: int, body: str) -> Response:
    return Response(
        content=body,
        status_code=status_code,
        media_type="application/json",
        headers=cors_headers(),
    )


def get_provider(request: Request) -> AggregatorProvider:
    provider = getattr(request.app.state, "aggregator_provider", None)
    if provider is None:
        provider = request.app.state.aggregator_provider = AggregatorProvider(settings)
    return provider


# ── Health ──────────────────────────────────────────────

@router.get("/health", response_model=HealthResponse, tags=["system"])
async def health():
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=VERSION,
    )


# ── Analytics report ────────────────────────────────────

async def analytics_preflight():
    return Response(status_code=204, headers=cors_headers())


async def get_analytics(provider: AggregatorProvider = Depends(get_provider)):
    try:
        aggregator = provider.get()
        report = await aggregator.aggregate()
        return _json(200, report.to_json())
    except Exception:
        logger.exception("Analytics aggregation failed")
        return _json(500, ErrorResponse(error=GENERIC_ERROR).model_dump_json())


for _path in REPORT_PATHS:
    router.add_api_route(
        _path, get_analytics, methods=["GET"], tags=["analytics"],
        responses={500: {"model": ErrorResponse}},
    )
    router.add_api_route(
        _path, analytics_preflight, methods=["OPTIONS"], tags=["analytics"],
        status_code=204, include_in_schema=False,
    )
