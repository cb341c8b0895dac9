"""Base REST client with retry logic.

This module provides BaseAPIClient, a synchronous httpx wrapper used by
the admin client. Requests block the calling test; no event loop involved.
"""

from typing import Any

import httpx
import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from teamcity_testkit.core.exceptions import ExternalServiceError

log = structlog.get_logger(__name__)


def _is_retryable(exc: BaseException) -> bool:
    """Transport errors, 429 and 5xx are worth another attempt."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        return status_code == 429 or status_code >= 500
    return False


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    log.warning(
        "request_retry",
        attempt=retry_state.attempt_number,
        error=str(exc),
    )


class BaseAPIClient:
    """Base REST client with retry support.

    Provides HTTP requests with:
    - Lazy client initialization (created on first request)
    - Retry with exponential backoff for transient failures
    - Immediate failure for client errors (4xx other than 429)
    - Proper resource cleanup

    Attributes:
        base_url: Base URL for all requests.
        timeout: Request timeout in seconds.
        headers: Default headers for all requests.
        max_attempts: Attempts per request, first one included.

    Example:
        with BaseAPIClient(base_url="http://localhost:8111", auth=("", token)) as client:
            response = client.get("/app/rest/server")
    """

    DEFAULT_HEADERS = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
        max_attempts: int = 3,
        backoff: float = 0.5,
    ) -> None:
        """Initialize BaseAPIClient.

        Args:
            base_url: Base URL for all requests.
            timeout: Request timeout in seconds (default: 30).
            headers: Extra headers merged over the JSON defaults.
            auth: Basic auth pair, if the API needs one.
            max_attempts: Attempts per request (default: 3).
            backoff: Backoff multiplier in seconds (default: 0.5).
        """
        self.base_url = base_url
        self.timeout = timeout
        self.headers = {**self.DEFAULT_HEADERS, **(headers or {})}
        self.auth = auth
        self.max_attempts = max_attempts
        self.backoff = backoff
        self._client: httpx.Client | None = None

    def __enter__(self) -> "BaseAPIClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client (lazy initialization)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                auth=self.auth,
            )
            log.debug("httpx_client_created", base_url=self.base_url)
        return self._client

    def close(self) -> None:
        """Close the httpx client and release resources."""
        if self._client is not None:
            self._client.close()
            self._client = None
            log.debug("httpx_client_closed", base_url=self.base_url)

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Make an HTTP request with retry.

        Args:
            method: HTTP method (GET, POST, DELETE).
            path: Request path (appended to base_url).
            **kwargs: Additional arguments passed to httpx.request.

        Returns:
            httpx.Response on success.

        Raises:
            ExternalServiceError: On a client error or once all attempts fail.
        """
        client = self._get_client()
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff, max=4),
            retry=retry_if_exception(_is_retryable),
            before_sleep=_log_retry,
            reraise=True,
        )

        try:
            for attempt in retrying:
                with attempt:
                    log.debug("request_attempt", method=method, path=path)
                    response = client.request(method, path, **kwargs)
                    response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            log.warning(
                "request_failed",
                method=method,
                path=path,
                status_code=status_code,
            )
            raise ExternalServiceError(
                service=self.base_url,
                message=f"{method} {path} returned {status_code}: {e.response.text[:200]}",
                status_code=status_code,
            ) from e
        except httpx.TransportError as e:
            log.error("request_connection_error", method=method, path=path, error=str(e))
            raise ExternalServiceError(
                service=self.base_url,
                message=f"{method} {path} failed after {self.max_attempts} attempts: {e}",
            ) from e

        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return self._request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return self._request("POST", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a DELETE request."""
        return self._request("DELETE", path, **kwargs)
