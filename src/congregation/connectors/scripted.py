"""Scripted in-memory fetcher for tests and offline development.

ScriptedFetcher implements the RawFetcher contract without any network
calls. It can be configured to:
- Answer a URL path with a fixed payload (routes)
- Answer successive calls from a queue (pages of a cursor walk)
- Raise a specific ConnectorError
- Record every call for later assertions
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

from congregation.connectors.base import ConnectorError, ResourceNotFoundError


@dataclass
class ScriptedResponse:
    """Canned response: a JSON object, or an error to raise."""

    data: Optional[Dict[str, Any]] = None
    error: Optional[ConnectorError] = None


Scripted = Union[ScriptedResponse, Dict[str, Any], ConnectorError]


def _as_response(item: Scripted) -> ScriptedResponse:
    if isinstance(item, ScriptedResponse):
        return item
    if isinstance(item, ConnectorError):
        return ScriptedResponse(error=item)
    return ScriptedResponse(data=item)


class ScriptedFetcher:
    """RawFetcher returning canned payloads.

    Lookup order for each call: the queue (if non-empty), then a route
    matching the path plus the nextPageToken parameter ("<path>#<token>"),
    then a route matching the URL path alone. Unmatched calls raise
    ResourceNotFoundError.
    """

    def __init__(self, responses: Optional[List[Scripted]] = None):
        self._queue: List[ScriptedResponse] = [_as_response(r) for r in responses or []]
        self._routes: Dict[str, ScriptedResponse] = {}
        self._call_log: List[Dict[str, Any]] = []

    def queue(self, *responses: Scripted) -> None:
        """Append responses answered in order by upcoming calls."""
        self._queue.extend(_as_response(r) for r in responses)

    def route(self, path: str, response: Scripted, cursor: Optional[str] = None) -> None:
        """Answer every call to path (optionally only for one cursor)."""
        key = f"{path}#{cursor}" if cursor is not None else path
        self._routes[key] = _as_response(response)

    def clear(self) -> None:
        """Drop queued responses, routes and the call log."""
        self._queue.clear()
        self._routes.clear()
        self._call_log.clear()

    def get_call_log(self) -> List[Dict[str, Any]]:
        """Get log of all fetch calls."""
        return self._call_log.copy()

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def was_called(self, path: str) -> bool:
        """Check if any call hit the given URL path."""
        return any(call["path"] == path for call in self._call_log)

    def fetch(
        self,
        url: str,
        method: str = "GET",
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        path = urlparse(url).path or url
        params = dict(params or {})
        self._call_log.append({
            "url": url,
            "path": path,
            "method": method,
            "params": params,
            "access_token": access_token,
        })

        if self._queue:
            response = self._queue.pop(0)
        else:
            cursor = params.get("nextPageToken")
            response = self._routes.get(f"{path}#{cursor}") if cursor else None
            response = response or self._routes.get(path)
        if response is None:
            raise ResourceNotFoundError(f"No scripted response for {method} {path}", "scripted")

        if response.error is not None:
            raise response.error
        return dict(response.data or {})
