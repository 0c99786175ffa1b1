"""
Dashboard page — server-rendered view of the analytics report.
"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from analytics_api.services.dashboard import DashboardRenderer, render_html

dashboard_router = APIRouter(tags=["dashboard"])


@dashboard_router.get("/dashboard", response_class=HTMLResponse)
async def dashboard_page():
    view = await DashboardRenderer().load()
    return HTMLResponse(render_html(view))
