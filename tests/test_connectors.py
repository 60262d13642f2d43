"""Tests for the connector layer.

Tests cover:
- Bearer authentication and request policy
- HTTPFetcher over httpx.MockTransport (headers, retries, error mapping)
- ScriptedFetcher
- Credential providers

No network calls - all tests are offline.
"""

import json
import logging
import re

import httpx
import pytest

from congregation.config import Config
from congregation.connectors import (
    AuthenticationError,
    AuthorizationError,
    BearerTokenAuth,
    ConflictError,
    ConnectionError,
    ConnectorError,
    CredentialProvider,
    EnvironmentCredentials,
    HTTPFetcher,
    ProtocolError,
    RateLimitError,
    RawFetcher,
    RequestPolicy,
    ResourceNotFoundError,
    ScriptedFetcher,
    ScriptedResponse,
    ServiceUnavailableError,
    StaticCredentials,
    TimeoutError,
    ValidationError,
)

URL = "https://tkt.my.salesforce.com/services/apexrest/members"


def make_fetcher(handler, max_retries=0, sleeps=None):
    """HTTPFetcher over a mock transport with a recording sleep."""
    policy = RequestPolicy(max_retries=max_retries, retry_delay=0.5, retry_backoff=2.0)
    recorder = sleeps if sleeps is not None else []
    return HTTPFetcher(policy=policy, transport=httpx.MockTransport(handler), sleep=recorder.append)


def json_response(status, body, headers=None):
    return httpx.Response(status, content=json.dumps(body).encode(), headers=headers)


# =============================================================================
# Authentication and policy
# =============================================================================


class TestBearerTokenAuth:
    """Tests for BearerTokenAuth."""

    def test_headers(self):
        """A token becomes an Authorization header."""
        assert BearerTokenAuth("tok").get_headers() == {"Authorization": "Bearer tok"}

    def test_empty(self):
        """No token, no header."""
        auth = BearerTokenAuth()
        assert auth.is_configured() is False
        assert auth.get_headers() == {}


class TestRequestPolicy:
    """Tests for RequestPolicy defaults."""

    def test_retry_statuses(self):
        """Rate limits and server errors are retried."""
        policy = RequestPolicy()
        assert 429 in policy.retry_on_status
        assert 503 in policy.retry_on_status
        assert 404 not in policy.retry_on_status

    def test_json_accept_header(self):
        """JSON is requested by default."""
        assert RequestPolicy().default_headers["Accept"] == "application/json"


# =============================================================================
# HTTPFetcher
# =============================================================================


class TestHTTPFetcher:
    """Tests for HTTPFetcher requests."""

    def test_fetch_json(self):
        """A JSON object body is returned with auth and params sent."""
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["params"] = dict(request.url.params)
            seen["method"] = request.method
            return json_response(200, {"members": []})

        data = make_fetcher(handler).fetch(URL, params={"pageSize": "5"}, access_token="tok")
        assert data == {"members": []}
        assert seen == {"auth": "Bearer tok", "params": {"pageSize": "5"}, "method": "GET"}

    def test_user_agent(self):
        """The policy's user agent is sent."""

        def handler(request):
            assert request.headers["User-Agent"] == "congregation-kit/0.1"
            return json_response(200, {})

        assert make_fetcher(handler).fetch(URL) == {}

    def test_non_json_body(self):
        """Non-JSON bodies raise ProtocolError."""
        fetcher = make_fetcher(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(ProtocolError, match="not JSON"):
            fetcher.fetch(URL)

    def test_non_object_body(self):
        """JSON arrays raise ProtocolError."""
        fetcher = make_fetcher(lambda request: json_response(200, [1, 2]))
        with pytest.raises(ProtocolError, match="expected object"):
            fetcher.fetch(URL)

    def test_satisfies_protocol(self):
        """HTTPFetcher is a RawFetcher."""
        assert isinstance(make_fetcher(lambda request: json_response(200, {})), RawFetcher)


class TestHTTPErrorMapping:
    """Tests for status code mapping."""

    @pytest.mark.parametrize(
        "status,error_cls",
        [
            (400, ValidationError),
            (401, AuthenticationError),
            (403, AuthorizationError),
            (404, ResourceNotFoundError),
            (409, ConflictError),
            (422, ValidationError),
            (429, RateLimitError),
            (500, ServiceUnavailableError),
            (418, ConnectorError),
        ],
    )
    def test_status_maps_to_error(self, status, error_cls):
        """Each status raises its ConnectorError subclass."""
        fetcher = make_fetcher(lambda request: json_response(status, {"error": "x"}))
        with pytest.raises(error_cls):
            fetcher.fetch(URL)

    def test_rate_limit_retry_after(self):
        """Retry-After is carried on RateLimitError."""
        fetcher = make_fetcher(lambda request: json_response(429, {}, headers={"Retry-After": "7"}))
        with pytest.raises(RateLimitError) as exc_info:
            fetcher.fetch(URL)
        assert exc_info.value.retry_after == 7.0

    def test_connect_error(self):
        """Connection failures map to ConnectionError."""

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ConnectionError, match="Failed to connect"):
            make_fetcher(handler).fetch(URL)

    def test_timeout(self):
        """Timeouts map to TimeoutError."""

        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(TimeoutError):
            make_fetcher(handler).fetch(URL)


class TestHTTPRetries:
    """Tests for retry behaviour."""

    def test_retries_then_succeeds(self):
        """Retryable statuses are retried with exponential backoff."""
        statuses = [503, 502, 200]
        sleeps = []

        def handler(request):
            status = statuses.pop(0)
            return json_response(status, {"members": []} if status == 200 else {})

        data = make_fetcher(handler, max_retries=3, sleeps=sleeps).fetch(URL)
        assert data == {"members": []}
        assert sleeps == [0.5, 1.0]

    def test_retry_after_honoured(self):
        """Retry-After overrides the backoff delay."""
        responses = [json_response(429, {}, headers={"Retry-After": "3"}), json_response(200, {})]
        sleeps = []
        make_fetcher(lambda request: responses.pop(0), max_retries=1, sleeps=sleeps).fetch(URL)
        assert sleeps == [3.0]

    def test_retry_warning_reports_elapsed(self, caplog):
        """The retry warning names the status and how long the attempt took."""
        responses = [json_response(503, {}), json_response(200, {})]
        with caplog.at_level(logging.WARNING, logger="congregation.connectors.http_client"):
            make_fetcher(lambda request: responses.pop(0), max_retries=1).fetch(URL)
        assert re.search(r"answered 503 in \d+\.\d{2}s; retry 1/1", caplog.text)

    def test_retries_exhausted(self):
        """The mapped error is raised once retries run out."""
        calls = []

        def handler(request):
            calls.append(request)
            return json_response(503, {})

        with pytest.raises(ServiceUnavailableError):
            make_fetcher(handler, max_retries=2).fetch(URL)
        assert len(calls) == 3

    def test_client_errors_not_retried(self):
        """4xx other than 429 fail immediately."""
        calls = []

        def handler(request):
            calls.append(request)
            return json_response(404, {})

        with pytest.raises(ResourceNotFoundError):
            make_fetcher(handler, max_retries=3).fetch(URL)
        assert len(calls) == 1

    def test_connect_errors_retried(self):
        """Connection failures are retried too."""
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("refused", request=request)
            return json_response(200, {"ok": True})

        assert make_fetcher(handler, max_retries=1).fetch(URL) == {"ok": True}


# =============================================================================
# ScriptedFetcher
# =============================================================================


class TestScriptedFetcher:
    """Tests for ScriptedFetcher."""

    def test_route(self):
        """Routed paths answer with their payload."""
        fetcher = ScriptedFetcher()
        fetcher.route("/services/apexrest/members", {"members": []})
        assert fetcher.fetch(URL) == {"members": []}
        assert fetcher.was_called("/services/apexrest/members")

    def test_queue_before_routes(self):
        """Queued responses are used first, in order."""
        fetcher = ScriptedFetcher([{"n": 1}])
        fetcher.queue({"n": 2})
        fetcher.route("/services/apexrest/members", {"n": 3})
        assert [fetcher.fetch(URL)["n"] for _ in range(3)] == [1, 2, 3]

    def test_cursor_route(self):
        """Cursor-specific routes win over the plain path."""
        fetcher = ScriptedFetcher()
        fetcher.route("/services/apexrest/members", {"page": 1})
        fetcher.route("/services/apexrest/members", {"page": 2}, cursor="c2")
        assert fetcher.fetch(URL, params={"nextPageToken": "c2"}) == {"page": 2}
        assert fetcher.fetch(URL) == {"page": 1}

    def test_scripted_error(self):
        """Scripted errors are raised."""
        fetcher = ScriptedFetcher([ScriptedResponse(error=RateLimitError("slow down"))])
        with pytest.raises(RateLimitError):
            fetcher.fetch(URL)

    def test_unmatched(self):
        """Unscripted calls raise ResourceNotFoundError."""
        with pytest.raises(ResourceNotFoundError, match="No scripted response"):
            ScriptedFetcher().fetch(URL)

    def test_call_log(self):
        """Calls are logged with params and token."""
        fetcher = ScriptedFetcher([{}])
        fetcher.fetch(URL, params={"pageSize": "1"}, access_token="tok")
        call = fetcher.get_call_log()[0]
        assert call["params"] == {"pageSize": "1"}
        assert call["access_token"] == "tok"
        fetcher.clear()
        assert fetcher.call_count == 0

    def test_satisfies_protocol(self):
        """ScriptedFetcher is a RawFetcher."""
        assert isinstance(ScriptedFetcher(), RawFetcher)


# =============================================================================
# Credentials
# =============================================================================


class TestCredentials:
    """Tests for credential providers."""

    def test_static(self):
        """Static credentials strip a trailing slash from the URL."""
        creds = StaticCredentials("tok", "https://tkt.my.salesforce.com/")
        assert creds.get_credentials() == ("tok", "https://tkt.my.salesforce.com")
        assert isinstance(creds, CredentialProvider)

    def test_static_missing_url(self):
        """A missing instance URL raises AuthenticationError."""
        with pytest.raises(AuthenticationError, match="No instance URL"):
            StaticCredentials("tok", "").get_credentials()

    def test_environment(self, monkeypatch):
        """Environment credentials read configuration."""
        monkeypatch.setenv("CONGREGATION_ACCESS_TOKEN", "env-tok")
        monkeypatch.setenv("CONGREGATION_INSTANCE_URL", "https://env.example.com")
        creds = EnvironmentCredentials(Config())
        assert creds.get_credentials() == ("env-tok", "https://env.example.com")

    def test_environment_missing(self, monkeypatch):
        """Missing environment values raise AuthenticationError."""
        monkeypatch.delenv("CONGREGATION_ACCESS_TOKEN", raising=False)
        monkeypatch.setenv("CONGREGATION_INSTANCE_URL", "https://env.example.com")
        settings = Config()
        settings.access_token = None
        with pytest.raises(AuthenticationError, match="No access token"):
            EnvironmentCredentials(settings).get_credentials()
