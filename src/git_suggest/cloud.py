"""HTTP transport for the git-suggest cloud API."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://app.gitbutler.com/api/"


class HttpClient:
    """Minimal JSON client for the hosted API.

    A single ``httpx.AsyncClient`` can be shared between calls; when none is
    given a short-lived one is created per request.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: API base URL, requests are made relative to it
            timeout: Request timeout in seconds
            client: Shared async client to send requests through
        """
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.timeout = timeout
        self._client = client

    def _headers(self, token: str | None) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if token:
            headers["X-Auth-Token"] = token
        return headers

    async def post(
        self, path: str, body: dict[str, Any], token: str | None = None
    ) -> Any:
        """POST a JSON body and return the decoded JSON response.

        Raises:
            httpx.HTTPStatusError: If the API answers with a non-2xx status
            httpx.RequestError: If the request could not be sent
        """
        url = f"{self.base_url}{path.lstrip('/')}"
        logger.debug(f"POST {url}")

        if self._client is not None:
            response = await self._client.post(
                url, json=body, headers=self._headers(token), timeout=self.timeout
            )
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    url, json=body, headers=self._headers(token)
                )

        response.raise_for_status()
        return response.json()
