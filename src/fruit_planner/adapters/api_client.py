"""Backend HTTP API client."""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from fruit_planner.services.storage import AUTH_TOKEN_KEY, KeyValueStore

DEFAULT_ERROR_MESSAGE = "Network response was not ok"

_logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when a request fails at the transport or API level."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.endpoint = endpoint


class ApiClient(Protocol):
    """Interface for backend API interactions."""

    async def get(self, endpoint: str) -> Any:
        """Send a GET request and return the response data."""

    async def post(self, endpoint: str, json: object | None = None) -> Any:
        """Send a POST request and return the response data."""

    async def put(self, endpoint: str, json: object | None = None) -> Any:
        """Send a PUT request and return the response data."""

    async def delete(self, endpoint: str, json: object | None = None) -> Any:
        """Send a DELETE request and return the response data."""


@dataclass
class HttpxApiClient(ApiClient):
    """HTTPX-backed API client speaking the `{success, data, error}` envelope."""

    base_url: str
    http_client: httpx.AsyncClient
    store: KeyValueStore
    timeout: float = 15

    @classmethod
    def create(
        cls, base_url: str, store: KeyValueStore, timeout: float = 15
    ) -> "HttpxApiClient":
        """Create an API client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            store=store,
            timeout=timeout,
        )

    async def get(self, endpoint: str) -> Any:
        """Send a GET request."""
        return await self._request("GET", endpoint)

    async def post(self, endpoint: str, json: object | None = None) -> Any:
        """Send a POST request."""
        return await self._request("POST", endpoint, json)

    async def put(self, endpoint: str, json: object | None = None) -> Any:
        """Send a PUT request."""
        return await self._request("PUT", endpoint, json)

    async def delete(self, endpoint: str, json: object | None = None) -> Any:
        """Send a DELETE request, optionally with a JSON body."""
        return await self._request("DELETE", endpoint, json)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.store.get(AUTH_TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self, method: str, endpoint: str, json: object | None = None
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = await self.http_client.request(
                method,
                url,
                headers=self._headers(),
                json=json,
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            _logger.error("API %s error (%s): %s", method, endpoint, exc)
            message = str(exc) or DEFAULT_ERROR_MESSAGE
            raise ApiError(message, endpoint=endpoint) from exc

        try:
            body = response.json()
        except ValueError as exc:
            _logger.error(
                "API %s error (%s): undecodable body, status=%s",
                method,
                endpoint,
                response.status_code,
            )
            raise ApiError(
                DEFAULT_ERROR_MESSAGE,
                status_code=response.status_code,
                endpoint=endpoint,
            ) from exc

        return _unwrap(method, endpoint, response.status_code, body)


def _unwrap(method: str, endpoint: str, status_code: int, body: object) -> Any:
    """Return the envelope's data or raise on a failed response."""
    envelope = body if isinstance(body, dict) else {}
    failed = not httpx.codes.is_success(status_code) or envelope.get("success") is False
    if failed:
        message = envelope.get("error") or DEFAULT_ERROR_MESSAGE
        _logger.error(
            "API %s error (%s): status=%s message=%s",
            method,
            endpoint,
            status_code,
            message,
        )
        raise ApiError(str(message), status_code=status_code, endpoint=endpoint)
    if "data" in envelope and envelope["data"] is not None:
        return envelope["data"]
    return body
