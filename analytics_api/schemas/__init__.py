"""
Analytics Dashboard — Pydantic response schemas.
"""

from pydantic import BaseModel, Field


class TopPage(BaseModel):
    path: str
    title: str
    visits: int = Field(0, ge=0)


class DailyVisits(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    visits: int = Field(0, ge=0)


class MonthlyVisits(BaseModel):
    period: str = Field(..., description="Localized 'Mon YYYY'")
    visits: int = Field(0, ge=0)


class AnalyticsReport(BaseModel):
    total_visits: int = Field(0, alias="totalVisits", ge=0)
    monthly_visits: int = Field(0, alias="monthlyVisits", ge=0)
    top_pages: list[TopPage] = Field(default_factory=list, alias="topPages")
    devices: dict[str, int] = Field(default_factory=dict)
    browsers: dict[str, int] = Field(default_factory=dict)
    daily_visits: list[DailyVisits] = Field(default_factory=list, alias="dailyVisits")
    monthly_trend: list[MonthlyVisits] = Field(default_factory=list, alias="monthlyTrend")
    last_update: str = Field(..., alias="lastUpdate")

    model_config = {"populate_by_name": True}

    def to_json(self) -> str:
        """Wire form: camelCase keys, field order as declared."""
        return self.model_dump_json(by_alias=True)


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
