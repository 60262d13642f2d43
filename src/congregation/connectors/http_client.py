"""httpx-backed RawFetcher with retry support.

Wraps httpx with RequestPolicy enforcement:
- Configurable timeouts
- Automatic retries with exponential backoff (honouring Retry-After)
- Error mapping to the ConnectorError hierarchy
- JSON object bodies only; anything else is a ProtocolError

Tests pass an httpx.MockTransport instead of touching the network.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from congregation.connectors.base import (
    AuthenticationError,
    AuthorizationError,
    BearerTokenAuth,
    ConflictError,
    ConnectionError,
    ConnectorError,
    ProtocolError,
    RateLimitError,
    RequestPolicy,
    ResourceNotFoundError,
    ServiceUnavailableError,
    TimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)

CONNECTOR_NAME = "http"


@dataclass
class HTTPResponse:
    """Simplified HTTP response wrapper."""

    status_code: int
    headers: Dict[str, str]
    body: bytes
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        """Check if status code indicates success (2xx)."""
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json.loads(self.body)


class HTTPFetcher:
    """RawFetcher over HTTP.

    Args:
        policy: Timeouts and retries
        transport: Optional httpx transport (e.g. httpx.MockTransport)
        sleep: Function used to wait between retries
    """

    def __init__(
        self,
        policy: Optional[RequestPolicy] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.policy = policy or RequestPolicy()
        self.transport = transport
        self.sleep = sleep

    def _build_headers(self, access_token: Optional[str]) -> Dict[str, str]:
        """Build request headers including auth and defaults."""
        headers = {"User-Agent": self.policy.user_agent}
        headers.update(self.policy.default_headers)
        headers.update(BearerTokenAuth(access_token or "").get_headers())
        return headers

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """Check if request should be retried."""
        if attempt >= self.policy.max_retries:
            return False
        return status_code in self.policy.retry_on_status

    def _get_retry_delay(self, attempt: int, retry_after: Optional[float] = None) -> float:
        """Calculate retry delay with exponential backoff."""
        if retry_after is not None:
            return retry_after
        return self.policy.retry_delay * (self.policy.retry_backoff ** attempt)

    @staticmethod
    def _retry_after(headers: Dict[str, str]) -> Optional[float]:
        value = headers.get("retry-after") or headers.get("Retry-After")
        try:
            return float(value) if value else None
        except ValueError:
            return None

    def _map_error(self, status_code: int, body: bytes, headers: Dict[str, str]) -> ConnectorError:
        """Map HTTP status code to appropriate ConnectorError."""
        body_str = body.decode("utf-8", errors="replace")

        if status_code == 401:
            return AuthenticationError(
                f"Authentication failed: {body_str}", connector_name=CONNECTOR_NAME
            )
        elif status_code == 403:
            return AuthorizationError(
                f"Permission denied: {body_str}", connector_name=CONNECTOR_NAME
            )
        elif status_code == 404:
            return ResourceNotFoundError(
                f"Resource not found: {body_str}", connector_name=CONNECTOR_NAME
            )
        elif status_code == 409:
            return ConflictError(
                f"Resource conflict: {body_str}", connector_name=CONNECTOR_NAME
            )
        elif status_code in (400, 422):
            return ValidationError(
                f"Request rejected ({status_code}): {body_str}", connector_name=CONNECTOR_NAME
            )
        elif status_code == 429:
            return RateLimitError(
                f"Rate limit exceeded: {body_str}",
                connector_name=CONNECTOR_NAME,
                retry_after=self._retry_after(headers),
            )
        elif status_code >= 500:
            return ServiceUnavailableError(
                f"Service error ({status_code}): {body_str}", connector_name=CONNECTOR_NAME
            )
        else:
            return ConnectorError(
                f"HTTP error {status_code}: {body_str}", connector_name=CONNECTOR_NAME
            )

    def _sleep_and_retry(self, attempt: int, retry_after: Optional[float] = None) -> bool:
        """Sleep before retry if attempts remain. Returns True if should retry."""
        if attempt < self.policy.max_retries:
            self.sleep(self._get_retry_delay(attempt, retry_after))
            return True
        return False

    def _execute_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        params: Optional[Dict[str, str]],
    ) -> HTTPResponse:
        """Execute a single HTTP request."""
        timeout = httpx.Timeout(self.policy.read_timeout, connect=self.policy.connect_timeout)
        start_time = time.monotonic()
        with httpx.Client(timeout=timeout, transport=self.transport) as client:
            response = client.request(method=method, url=url, params=params, headers=headers)
        return HTTPResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
            elapsed_seconds=time.monotonic() - start_time,
        )

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> HTTPResponse:
        """Make an HTTP request with retry logic.

        Raises:
            ConnectorError: On HTTP errors once retries are exhausted
            TimeoutError: On request timeout
            ConnectionError: On connection failure
        """
        headers = self._build_headers(access_token)
        last_error: Optional[ConnectorError] = None

        for attempt in range(self.policy.max_retries + 1):
            try:
                result = self._execute_request(method, url, headers, params)
            except httpx.TimeoutException:
                last_error = TimeoutError(
                    f"Request timed out after {self.policy.read_timeout}s",
                    connector_name=CONNECTOR_NAME,
                    timeout_seconds=self.policy.read_timeout,
                )
            except httpx.ConnectError as e:
                last_error = ConnectionError(
                    f"Failed to connect to {url}: {e}", connector_name=CONNECTOR_NAME
                )
            except httpx.HTTPError as e:
                last_error = ConnectorError(f"HTTP error: {e}", connector_name=CONNECTOR_NAME)
            else:
                if result.ok:
                    return result
                if self._should_retry(result.status_code, attempt):
                    logger.warning(
                        f"{method} {url} answered {result.status_code} in "
                        f"{result.elapsed_seconds:.2f}s; retry {attempt + 1}/{self.policy.max_retries}"
                    )
                    self._sleep_and_retry(attempt, self._retry_after(result.headers))
                    continue
                raise self._map_error(result.status_code, result.body, result.headers)

            logger.warning(f"{method} {url} failed: {last_error}")
            if not self._sleep_and_retry(attempt):
                break

        if last_error:
            raise last_error
        raise ConnectorError("Request failed after all retries", connector_name=CONNECTOR_NAME)

    def fetch(
        self,
        url: str,
        method: str = "GET",
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fetch a JSON object (RawFetcher contract)."""
        response = self.request(method, url, params=params, access_token=access_token)
        try:
            data = response.json()
        except ValueError as e:
            raise ProtocolError(
                f"Response from {url} is not JSON: {e}", connector_name=CONNECTOR_NAME
            ) from e
        if not isinstance(data, dict):
            raise ProtocolError(
                f"Response from {url} is a JSON {type(data).__name__}, expected object",
                connector_name=CONNECTOR_NAME,
            )
        return data
