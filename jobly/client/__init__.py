"""
API client for the Jobly REST API.
"""

from .api import ApiCredentials, JoblyApi, JoblyApiError

__all__ = [
    "ApiCredentials",
    "JoblyApi",
    "JoblyApiError",
]
