"""
FastAPI Application — entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from analytics_api.config import settings
from analytics_api.routes import router, VERSION
from analytics_api.routes.dashboard import dashboard_router
from analytics_api.services.aggregator import AggregatorProvider

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown hook."""
    logger.info("🚀 Starting Analytics Dashboard API v%s", VERSION)
    # GA4 client is built on the first report request and kept for the process
    app.state.aggregator_provider = AggregatorProvider(settings)
    if not settings.has_credentials:
        logger.warning("⚠️ GOOGLE_CLIENT_EMAIL / GOOGLE_PRIVATE_KEY not set — reports will fail")

    yield

    logger.info("👋 Shutdown complete")


app = FastAPI(
    title="Analytics Dashboard API",
    description="GA4 traffic report for the public website dashboard.",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(router)
app.include_router(dashboard_router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "service": "Analytics Dashboard API",
        "version": VERSION,
        "report": "/get-analytics",
        "dashboard": "/dashboard",
        "docs": "/docs",
    }
