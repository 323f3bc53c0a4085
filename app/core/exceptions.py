"""
Exceptions raised by the dashboard when talking to the commerce platform.
"""
from typing import Optional


class DashboardError(Exception):
    """Base exception for all dashboard errors."""
    pass


class ConfigurationError(DashboardError):
    """Raised when the admin connection is not configured."""
    pass


class AdminAPIError(DashboardError):
    """Raised when an admin API call fails or returns an unusable payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
