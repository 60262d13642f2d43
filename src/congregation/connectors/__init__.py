"""Transport collaborators: raw fetchers, credentials and transport errors."""

from congregation.connectors.base import (
    AuthenticationError,
    AuthorizationError,
    BearerTokenAuth,
    ConflictError,
    ConnectionError,
    ConnectorError,
    CredentialProvider,
    ProtocolError,
    RateLimitError,
    RawFetcher,
    RequestPolicy,
    ResourceNotFoundError,
    ServiceUnavailableError,
    TimeoutError,
    ValidationError,
)
from congregation.connectors.credentials import EnvironmentCredentials, StaticCredentials
from congregation.connectors.http_client import HTTPFetcher, HTTPResponse
from congregation.connectors.scripted import ScriptedFetcher, ScriptedResponse

__all__ = [
    # Contracts
    "RawFetcher",
    "CredentialProvider",
    "BearerTokenAuth",
    "RequestPolicy",
    # Implementations
    "HTTPFetcher",
    "HTTPResponse",
    "ScriptedFetcher",
    "ScriptedResponse",
    "StaticCredentials",
    "EnvironmentCredentials",
    # Errors
    "ConnectorError",
    "ConnectionError",
    "TimeoutError",
    "AuthenticationError",
    "AuthorizationError",
    "RateLimitError",
    "ValidationError",
    "ResourceNotFoundError",
    "ConflictError",
    "ServiceUnavailableError",
    "ProtocolError",
]
