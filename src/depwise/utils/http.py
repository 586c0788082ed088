"""Async HTTP client used by the network analysis backends."""

import json
from typing import Any

import httpx

from depwise.errors import (
    BackendAuthenticationError,
    BackendConnectionError,
    BackendRateLimitError,
    BackendStatusError,
    BackendTimeoutError,
    ResponseParseError,
)
from depwise.utils.logging import get_logger

logger = get_logger(__name__)


class AsyncHttpClient:
    """Timeout-bounded async HTTP client for a single backend.

    Features:
    - One connection pool per backend, opened lazily
    - HTTP and network failures mapped to depwise transport errors
    - Automatic JSON parsing

    Retries are deliberately absent; the orchestrator owns retry policy.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        service: str,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            service: Human readable backend name used in error messages.
            base_url: Base URL for requests.
            timeout: Request timeout in seconds.
            headers: Default headers for all requests.
            transport: Optional httpx transport (tests inject a MockTransport).
        """
        self.service = service
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.default_headers = headers or {}
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AsyncHttpClient":
        """Enter async context."""
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit async context."""
        await self.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the underlying httpx client, creating it on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.default_headers,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    @property
    def is_open(self) -> bool:
        """Whether a connection pool is currently held."""
        return self._client is not None

    async def aclose(self) -> None:
        """Close the connection pool if one was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a single HTTP request.

        Args:
            method: HTTP method.
            url: Request URL, relative to the base URL.
            **kwargs: Additional arguments for httpx.

        Returns:
            HTTP response with a 2xx status.

        Raises:
            BackendTimeoutError: The request exceeded the timeout.
            BackendConnectionError: The backend could not be reached.
            BackendAuthenticationError: The backend returned 401 or 403.
            BackendRateLimitError: The backend returned 429.
            BackendStatusError: Any other non-success status.
        """
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise BackendTimeoutError(self.service, self.timeout) from e
        except httpx.HTTPError as e:
            raise BackendConnectionError(self.service, e) from e

        if response.is_success:
            return response

        detail = _error_detail(response)
        logger.debug(
            "%s %s returned %d: %s", method, url, response.status_code, detail
        )

        if response.status_code in (401, 403):
            raise BackendAuthenticationError(self.service, detail)

        if response.status_code == 429:
            raise BackendRateLimitError(
                self.service, _retry_after(response.headers.get("Retry-After"))
            )

        raise BackendStatusError(self.service, response.status_code, detail)

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make a GET request."""
        return await self._request("GET", url, params=params, headers=headers)

    async def post(
        self,
        url: str,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make a POST request with a JSON body."""
        return await self._request("POST", url, json=json, headers=headers)

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make a GET request and parse JSON response.

        Args:
            url: Request URL.
            params: Query parameters.
            headers: Additional headers.

        Returns:
            Parsed JSON data.
        """
        response = await self.get(url, params=params, headers=headers)
        return self._decode(response)

    async def post_json(
        self,
        url: str,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make a POST request and parse JSON response.

        Args:
            url: Request URL.
            json: JSON body.
            headers: Additional headers.

        Returns:
            Parsed JSON data.
        """
        response = await self.post(url, json=json, headers=headers)
        return self._decode(response)

    def _decode(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseParseError(self.service, f"response body is not JSON ({e})") from e


def _error_detail(response: httpx.Response) -> str:
    """Extract a short error description from an error response."""
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text[:200]

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            kind = error.get("type")
            message = error.get("message", "")
            return f"{kind}: {message}" if kind else str(message)
        if isinstance(error, str):
            return error
        if "message" in data:
            return str(data["message"])

    return response.text[:200]


def _retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None
