"""
Exceptions raised by the GA4 aggregation services.
"""


class AnalyticsError(Exception):
    """Base class for analytics aggregation failures."""


class CredentialsError(AnalyticsError):
    """Service-account configuration is missing or unusable."""


class ReportQueryError(AnalyticsError):
    """A single GA4 report query failed."""

    def __init__(self, query_name: str, cause: BaseException):
        self.query_name = query_name
        self.cause = cause
        super().__init__(f"GA4 query '{query_name}' failed: {cause}")
