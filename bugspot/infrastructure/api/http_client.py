"""
BugSpot HTTP Client - Low-level HTTP interactions with the BugSpot API.

This class handles only HTTP concerns, keeping infrastructure separate from domain logic.
"""
from typing import Any, Callable, Dict, List, Optional

import requests


class BugSpotHttpClient:
    """Low-level HTTP client for the BugSpot API."""

    SUBMIT_ENDPOINT = "api/bug-reports/submit"
    DEFAULT_TIMEOUT = 10

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str],
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        response_hooks: Optional[List[Callable]] = None
    ):
        """Initialize BugSpot HTTP client.

        Args:
            api_url: API base URL, e.g. https://api.bugspot.dev
            api_key: Project API key sent as X-API-Key
            timeout: Request timeout in seconds
            session: Optional requests session to reuse
            response_hooks: requests response hooks (e.g. a context collector's)
        """
        if not api_url:
            raise ValueError("API URL is required")

        self._base_url = api_url.rstrip('/')
        self._api_key = api_key or ""
        self._timeout = timeout
        self._session = session or requests.Session()
        for hook in response_hooks or []:
            self._session.hooks['response'].append(hook)

    @property
    def base_url(self) -> str:
        """Base URL for API calls."""
        return self._base_url

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def headers(self) -> Dict[str, str]:
        """Headers for API calls."""
        return {
            'Content-Type': 'application/json',
            'X-API-Key': self._api_key
        }

    def post(self, endpoint: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Make POST request to the BugSpot API.

        Args:
            endpoint: API endpoint (relative to base URL)
            data: Request body

        Returns:
            JSON response as dictionary

        Raises:
            requests.HTTPError: If the server answers with any non-2xx status
            requests.Timeout: If no response arrives within the timeout
            requests.RequestException: On connection and other transport errors
        """
        url = f"{self._base_url}/{endpoint}"
        response = self._session.post(
            url,
            headers=self.headers,
            json=data,
            timeout=self._timeout
        )
        response.raise_for_status()
        if not 200 <= response.status_code < 300:
            # 1xx and unfollowed 3xx pass raise_for_status
            raise requests.HTTPError(
                f"Unexpected status {response.status_code} for url: {url}",
                response=response
            )
        return response.json()

    def submit_bug_report(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a serialized report to /api/bug-reports/submit."""
        return self.post(self.SUBMIT_ENDPOINT, payload)

    def close(self) -> None:
        self._session.close()
