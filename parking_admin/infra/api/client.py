"""Parking backend REST API client with async HTTP support.

Provides the three remote operations the admin tool needs:
- list slot requests (paged, filtered by search text)
- approve one slot request
- reject one slot request with a reason

Design principles:
- Use httpx for modern async HTTP
- Map HTTP errors to typed exceptions carrying status and server message
- Bearer token read from the session store on every call
- Retry transient network errors on reads, fail fast on HTTP errors
"""

import asyncio
import logging
import time
from typing import Any

import httpx

from parking_admin.infra.api.exceptions import (
    ApiAuthenticationError,
    ApiAuthorizationError,
    ApiClientError,
    ApiConnectionError,
    ApiError,
    ApiNetworkError,
    ApiNotFoundError,
    ApiResponseError,
    ApiServerError,
    ApiTimeoutError,
    ApiValidationError,
)
from parking_admin.infra.observability import metrics
from parking_admin.infra.session.store import SessionStore

logger = logging.getLogger(__name__)

SLOT_REQUESTS_PATH = "/slot-requests"


class SlotRequestApiClient:
    """Async HTTP client for the parking backend's slot request endpoints.

    Example:
        client = SlotRequestApiClient(
            base_url="http://localhost:5000/api",
            session_store=store,
        )

        page = await client.get_slot_requests(page=1, limit=10, search="ABC")
        updated = await client.approve_slot_request(5)
        updated = await client.reject_slot_request(6, "Vehicle not registered")

        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        session_store: SessionStore,
        timeout_seconds: float = 10.0,
        max_retries: int = 3,
        retry_backoff_seconds: float = 0.5,
        verify_ssl: bool = True,
        metrics_enabled: bool = True,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: Backend API base URL (e.g. "http://localhost:5000/api")
            session_store: Source of the bearer token
            timeout_seconds: Request timeout in seconds
            max_retries: Attempts for transient network errors on reads
            retry_backoff_seconds: Backoff base; retry n waits base * 2**n
            verify_ssl: Verify SSL certificates
            metrics_enabled: Record Prometheus metrics for each call
        """
        self.base_url = base_url.rstrip("/")
        self.session_store = session_store
        self.max_retries = max_retries
        self.retry_backoff_seconds = retry_backoff_seconds
        self.verify_ssl = verify_ssl
        self.metrics_enabled = metrics_enabled

        self.timeout = httpx.Timeout(timeout_seconds)
        # One admin, a handful of calls per minute
        self.limits = httpx.Limits(max_connections=2, max_keepalive_connections=1)

        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Any, session_store: SessionStore) -> "SlotRequestApiClient":
        """Build a client from application settings."""
        return cls(
            base_url=settings.api_base_url,
            session_store=session_store,
            timeout_seconds=settings.api_timeout_seconds,
            max_retries=settings.api_max_retries,
            retry_backoff_seconds=settings.api_retry_backoff_seconds,
            verify_ssl=settings.api_verify_ssl,
            metrics_enabled=settings.metrics_enabled,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the pooled httpx client, creating it on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                limits=self.limits,
                verify=self.verify_ssl,
                follow_redirects=False,
            )
        return self._client

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aclose()

    async def __aenter__(self) -> "SlotRequestApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.session_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None,
        params: dict[str, Any] | None,
    ) -> httpx.Response:
        """Issue one HTTP call, translating httpx transport errors."""
        client = await self._get_client()
        try:
            return await client.request(
                method=method,
                url=path,
                json=payload,
                params=params,
                headers=self._headers(),
            )
        except httpx.TimeoutException as e:
            raise ApiTimeoutError(
                f"No response within {self.timeout.read}s: {method} {path}"
            ) from e
        except httpx.NetworkError as e:
            raise ApiNetworkError(
                f"Could not reach backend: {method} {path} ({type(e).__name__})"
            ) from e
        except httpx.HTTPError as e:
            # Protocol errors, dropped connections, undecodable content
            raise ApiNetworkError(
                f"Transport error: {method} {path} ({type(e).__name__}: {e})"
            ) from e

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        retry: bool = False,
    ) -> dict[str, Any]:
        """Call the backend and return the JSON body as a dict.

        Only timeouts and network errors are retried, and only when
        ``retry`` is set. HTTP error responses raise immediately.

        Args:
            operation: Logical operation name for logs and metrics
            method: HTTP method
            path: API path relative to the base URL
            json: JSON request body
            params: Query parameters
            retry: Retry transient failures (reads only)

        Raises:
            ApiTimeoutError: No response in time
            ApiNetworkError: Backend unreachable or transport failure
            ApiResponseError: 2xx response whose body is not JSON
            ApiClientError: 4xx response
            ApiServerError: 5xx response
        """
        attempts = self.max_retries if retry else 1
        started = time.monotonic()
        attempt = 0

        while True:
            attempt += 1
            try:
                response = await self._send(method, path, json, params)
                if response.is_error:
                    self._raise_for_response(response)
                body = _json_body(response, method, path)
            except ApiConnectionError as e:
                if attempt >= attempts:
                    self._record(operation, started, _connection_status(e))
                    raise
                delay = self.retry_backoff_seconds * 2 ** (attempt - 1)
                logger.warning(
                    f"{e}; attempt {attempt}/{attempts}, retrying in {delay}s",
                    extra={"operation": operation},
                )
                await asyncio.sleep(delay)
                continue
            except ApiResponseError:
                self._record(operation, started, "invalid_body")
                raise
            except ApiError as e:
                self._record(operation, started, str(e.status_code))
                raise

            self._record(operation, started, "success")
            return body

    def _record(self, operation: str, started: float, status: str) -> None:
        if self.metrics_enabled:
            metrics.record_api_request(operation, time.monotonic() - started, status)

    @staticmethod
    def _extract_server_message(response: httpx.Response) -> str | None:
        """Pull the server-supplied error message out of a JSON error body."""
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None
        message = body.get("error") or body.get("message")
        return message if isinstance(message, str) and message else None

    def _raise_for_response(self, response: httpx.Response) -> None:
        """Raise the ApiError subclass matching an error response."""
        status_code = response.status_code
        server_message = self._extract_server_message(response)
        detail = server_message or response.text

        named = _STATUS_ERRORS.get(status_code)
        if named is not None:
            error_class, label = named
            raise error_class(f"{label}: {detail}", server_message=server_message)
        if status_code in (400, 422):
            raise ApiValidationError(f"Validation error: {detail}", status_code, server_message)
        if status_code >= 500:
            raise ApiServerError(f"Server error ({status_code}): {detail}", status_code, server_message)
        raise ApiClientError(f"Client error ({status_code}): {detail}", status_code, server_message)

    async def get_slot_requests(
        self, page: int = 1, limit: int = 10, search: str = ""
    ) -> dict[str, Any]:
        """List slot requests.

        Args:
            page: 1-based page number
            limit: Rows per page
            search: Sanitized search text (omitted from the query when empty)

        Returns:
            ``{"data": [...], "meta": {"currentPage", "limit", "totalItems", "totalPages"}}``
        """
        params: dict[str, Any] = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        return await self._request("list", "GET", SLOT_REQUESTS_PATH, params=params, retry=True)

    async def approve_slot_request(self, request_id: int | str) -> dict[str, Any]:
        """Approve a slot request.

        Returns:
            The updated request; at least ``requestStatus`` and ``slotNumber``
        """
        return await self._request(
            "approve", "PATCH", f"{SLOT_REQUESTS_PATH}/{request_id}/approve"
        )

    async def reject_slot_request(self, request_id: int | str, reason: str) -> dict[str, Any]:
        """Reject a slot request.

        Returns:
            The updated request; at least ``requestStatus``
        """
        return await self._request(
            "reject",
            "PATCH",
            f"{SLOT_REQUESTS_PATH}/{request_id}/reject",
            json={"reason": reason},
        )


_STATUS_ERRORS: dict[int, tuple[type[ApiClientError], str]] = {
    401: (ApiAuthenticationError, "Authentication failed"),
    403: (ApiAuthorizationError, "Authorization denied"),
    404: (ApiNotFoundError, "Resource not found"),
}


def _connection_status(error: ApiConnectionError) -> str:
    return "timeout" if isinstance(error, ApiTimeoutError) else "network"


def _json_body(response: httpx.Response, method: str, path: str) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError as e:
        raise ApiResponseError(
            f"Response is not JSON: {method} {path} "
            f"({response.headers.get('content-type', 'no content-type')})",
            response.status_code,
        ) from e
    return body if isinstance(body, dict) else {"data": body}
