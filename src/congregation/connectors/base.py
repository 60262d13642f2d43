"""Transport abstractions consumed by the record layer.

The record layer talks to the CRM through two narrow contracts:
- RawFetcher: one request in, one untyped JSON object out
- CredentialProvider: (access_token, instance_url) for each operation

Also defined here:
- BearerTokenAuth: Authorization header for a fetch
- RequestPolicy: timeouts and retries for the HTTP fetcher
- ConnectorError hierarchy: typed transport failures
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from congregation.config import config

# =============================================================================
# Authentication
# =============================================================================


@dataclass
class BearerTokenAuth:
    """OAuth access token sent as a bearer header.

    Token acquisition is out of scope; this only holds the token.
    """

    access_token: str = ""
    token_type: str = "Bearer"

    def is_configured(self) -> bool:
        """Check if token is set."""
        return bool(self.access_token)

    def get_headers(self) -> Dict[str, str]:
        """Get authorization header."""
        if not self.access_token:
            return {}
        return {"Authorization": f"{self.token_type} {self.access_token}"}


# =============================================================================
# Request Policy
# =============================================================================


@dataclass
class RequestPolicy:
    """Policy for HTTP requests: timeouts and retries."""

    # Timeouts
    connect_timeout: float = 10.0  # seconds
    read_timeout: float = field(default_factory=lambda: config.timeout_s)

    # Retries
    max_retries: int = field(default_factory=lambda: config.max_retries)
    retry_delay: float = 1.0  # base delay in seconds
    retry_backoff: float = 2.0  # exponential backoff multiplier
    retry_on_status: List[int] = field(default_factory=lambda: [429, 500, 502, 503, 504])

    # Headers
    user_agent: str = "congregation-kit/0.1"
    default_headers: Dict[str, str] = field(
        default_factory=lambda: {"Accept": "application/json"}
    )


# =============================================================================
# Connector Error Hierarchy
# =============================================================================


class ConnectorError(Exception):
    """Base exception for transport errors."""

    def __init__(self, message: str, connector_name: str = "", details: Optional[Dict[str, Any]] = None):
        self.connector_name = connector_name
        self.details = details or {}
        super().__init__(message)


class ConnectionError(ConnectorError):
    """Failed to connect to the service."""

    pass


class TimeoutError(ConnectorError):
    """Request timed out."""

    def __init__(
        self,
        message: str = "Request timed out",
        connector_name: str = "",
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__(message, connector_name, {"timeout_seconds": timeout_seconds})
        self.timeout_seconds = timeout_seconds


class AuthenticationError(ConnectorError):
    """Authentication failed (missing credentials, expired token, etc.)."""

    pass


class AuthorizationError(ConnectorError):
    """Authenticated but not permitted."""

    pass


class RateLimitError(ConnectorError):
    """Rate limit exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        connector_name: str = "",
        retry_after: Optional[float] = None,
    ):
        super().__init__(message, connector_name, {"retry_after": retry_after})
        self.retry_after = retry_after


class ValidationError(ConnectorError):
    """Request rejected as invalid."""

    pass


class ResourceNotFoundError(ConnectorError):
    """Endpoint or resource not found (HTTP 404)."""

    pass


class ConflictError(ConnectorError):
    """Resource conflict."""

    pass


class ServiceUnavailableError(ConnectorError):
    """Service is temporarily unavailable."""

    pass


class ProtocolError(ConnectorError):
    """Response body was not the JSON object the API promises."""

    pass


# =============================================================================
# Contracts
# =============================================================================


@runtime_checkable
class RawFetcher(Protocol):
    """Performs one API request and returns the decoded JSON object."""

    def fetch(
        self,
        url: str,
        method: str = "GET",
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fetch a JSON object.

        Args:
            url: Absolute endpoint URL
            method: HTTP method
            params: Query parameters
            access_token: Bearer token for the Authorization header

        Returns:
            Parsed JSON object

        Raises:
            ConnectorError: On any transport or protocol failure
        """
        ...


@runtime_checkable
class CredentialProvider(Protocol):
    """Supplies credentials for one operation."""

    def get_credentials(self) -> Tuple[str, str]:
        """Return (access_token, instance_url)."""
        ...
