"""
Analytics Dashboard — Configuration via environment variables.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """All settings read from env / .env file."""

    # GA4 service account
    google_client_email: str = Field(default="", description="Service-account email")
    google_private_key: str = Field(
        default="",
        description="Service-account PEM key (escaped \\n sequences allowed)",
    )
    google_token_uri: str = Field(default="https://oauth2.googleapis.com/token")

    # GA4 property
    ga4_property_id: str = Field(default="233534697")
    ga4_epoch_start: str = Field(
        default="2020-01-01",
        description="Start date (YYYY-MM-DD) of the lifetime visits total",
    )

    # GA4 resolves "today" in the property's reporting time zone
    report_timezone: str = Field(default="America/Bogota", description="IANA zone of the GA4 property")

    # HTTP
    cors_allow_origin: str = Field(default="https://www.hdsa.gov.co")

    # Presentation
    report_locale: str = Field(default="es", description="Month labels in monthlyTrend")
    dashboard_locale: str = Field(default="es-CO", description="Dashboard number/date format")
    dashboard_api_url: str = Field(default="http://localhost:8000/get-analytics")
    dashboard_fetch_timeout: int = Field(default=30, description="Seconds")

    log_level: str = Field(default="INFO")

    @property
    def private_key_pem(self) -> str:
        """PEM key with literal ``\\n`` sequences turned into newlines."""
        return self.google_private_key.replace("\\n", "\n")

    @property
    def has_credentials(self) -> bool:
        return bool(self.google_client_email and self.google_private_key)

    @property
    def property_resource(self) -> str:
        """GA4 resource name, e.g. ``properties/233534697``."""
        prop = self.ga4_property_id
        return prop if prop.startswith("properties/") else f"properties/{prop}"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
