"""
Jobly API Client

Thin async wrapper around the Jobly REST API for frontends and scripts.
Nothing frontend-specific lives here, and nothing outside this module needs
to know URLs or the error envelope.
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass

import httpx

from jobly.core.config import get_settings
from jobly.utils.logger import get_logger

logger = get_logger(__name__)

settings = get_settings()


@dataclass(frozen=True)
class ApiCredentials:
    """Bearer token obtained from ``login`` or ``signup``."""
    token: str

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class JoblyApiError(Exception):
    """A failed API call; ``messages`` is always a list of strings."""

    def __init__(self, messages: List[str], status_code: Optional[int] = None):
        super().__init__("; ".join(messages))
        self.messages = messages
        self.status_code = status_code


def _error_messages(response: httpx.Response) -> List[str]:
    """Pull human-readable messages out of ``{"error": {"message": ...}}``."""
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return [f"Request failed with status {response.status_code}"]

    if isinstance(message, list):
        return [str(m) for m in message]
    return [str(message)]


class JoblyApi:
    """
    API client.

    Credentials are passed to each call instead of being stored on the
    client, so one instance can serve several users.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ) -> None:
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.API_TIMEOUT_SECONDS
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        method: str = "get",
        *,
        credentials: Optional[ApiCredentials] = None
    ) -> Dict[str, Any]:
        """
        Call ``METHOD base_url/endpoint``.

        GET sends ``data`` as query parameters, other methods as a JSON body.

        Raises:
            JoblyApiError: On a non-2xx response, a body that is not JSON, or a
                transport failure
        """
        data = data or {}
        method = method.upper()
        url = f"{self.base_url}/{endpoint}"
        headers = credentials.headers() if credentials else {}

        logger.debug("API Call", endpoint=endpoint, method=method)

        try:
            if method == "GET":
                response = await self._client.request(method, url, params=data, headers=headers)
            else:
                response = await self._client.request(method, url, json=data, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"API Error: {e}", endpoint=endpoint, method=method)
            raise JoblyApiError([str(e) or type(e).__name__])

        if response.is_error:
            messages = _error_messages(response)
            logger.error(
                "API Error",
                endpoint=endpoint,
                method=method,
                status=response.status_code,
                messages=messages
            )
            raise JoblyApiError(messages, response.status_code)

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError:
            logger.error(
                "API Error: response is not JSON",
                endpoint=endpoint,
                method=method,
                status=response.status_code
            )
            raise JoblyApiError(
                [f"Invalid response body with status {response.status_code}"],
                response.status_code
            )

    # Individual API routes

    async def get_company(
        self, handle: str, credentials: Optional[ApiCredentials] = None
    ) -> Dict[str, Any]:
        """Get details on a company by handle."""
        res = await self.request(f"companies/{handle}", credentials=credentials)
        return res["company"]

    async def get_companies(
        self, name: str = "", credentials: Optional[ApiCredentials] = None
    ) -> List[Dict[str, Any]]:
        """Get list of companies, optionally filtered by name."""
        res = await self.request("companies", {"name": name}, credentials=credentials)
        return res["companies"]

    async def get_jobs(
        self, title: str = "", credentials: Optional[ApiCredentials] = None
    ) -> List[Dict[str, Any]]:
        """Get list of jobs, optionally filtered by title."""
        res = await self.request("jobs", {"title": title}, credentials=credentials)
        return res["jobs"]

    async def get_job(
        self, job_id: int, credentials: Optional[ApiCredentials] = None
    ) -> Dict[str, Any]:
        """Get details on a job by id."""
        res = await self.request(f"jobs/{job_id}", credentials=credentials)
        return res["job"]

    async def signup(self, data: Dict[str, Any]) -> str:
        """Register a new user and return their token."""
        res = await self.request("auth/register", data, "post")
        return res["token"]

    async def login(self, data: Dict[str, Any]) -> str:
        """Log in and return the user's token."""
        res = await self.request("auth/token", data, "post")
        return res["token"]

    async def get_current_user(
        self, username: str, credentials: ApiCredentials
    ) -> Dict[str, Any]:
        """Get details on the logged-in user."""
        res = await self.request(f"users/{username}", credentials=credentials)
        return res["user"]

    async def update_profile(
        self, username: str, data: Dict[str, Any], credentials: ApiCredentials
    ) -> Dict[str, Any]:
        """Update a user's profile."""
        res = await self.request(f"users/{username}", data, "patch", credentials=credentials)
        return res["user"]

    async def apply_to_job(
        self, username: str, job_id: int, credentials: ApiCredentials
    ) -> None:
        """Apply to a job."""
        await self.request(f"users/{username}/jobs/{job_id}", {}, "post", credentials=credentials)
