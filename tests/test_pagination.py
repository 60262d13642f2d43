"""Tests for the cursor pagination walker.

Tests use an in-memory upstream of k pages; page i carries cursor "c<i+1>"
to the next page, and the last page carries none.
"""

from typing import Dict, List

import pytest
from conftest import members_page

from congregation.connectors import ServiceUnavailableError
from congregation.pagination import PaginationWalker, WalkState
from congregation.records.envelope import Envelope, resolve_members


class FakeUpstream:
    """k pages of members reachable only by cursor."""

    def __init__(self, pages: int, per_page: int = 2, error_on_page: int = 0):
        self.pages = pages
        self.per_page = per_page
        self.error_on_page = error_on_page
        self.calls: List[Dict[str, str]] = []

    def _page_number(self, params: Dict[str, str]) -> int:
        token = params.get("nextPageToken")
        if token is not None:
            return int(token[1:])
        return int(params["pageNumber"])

    def __call__(self, params: Dict[str, str]) -> Envelope:
        self.calls.append(dict(params))
        page = self._page_number(params)
        if page == self.error_on_page:
            return resolve_members({"success": False, "message": f"page {page} failed"})
        if page > self.pages:
            return resolve_members({"members": [], "pageSize": self.per_page})
        ids = [f"TKT{page}{i}" for i in range(self.per_page)]
        next_token = f"c{page + 1}" if page < self.pages else None
        return resolve_members(
            members_page(ids, next_token=next_token, page_size=self.per_page, pageNumber=page)
        )


class TestWalk:
    """Tests for reaching a target page."""

    def test_first_page(self):
        """Page 1 is one fetch by page number."""
        upstream = FakeUpstream(pages=3)
        envelope = PaginationWalker(upstream).walk(1, page_size=2)
        assert len(upstream.calls) == 1
        assert upstream.calls[0] == {"pageSize": "2", "pageNumber": "1"}
        assert envelope.records[0].member_id == "TKT10"

    def test_reaches_target(self):
        """Page N costs N fetches: page 1 by number, then cursors."""
        upstream = FakeUpstream(pages=5)
        envelope = PaginationWalker(upstream).walk(3, page_size=2)
        assert len(upstream.calls) == 3
        assert upstream.calls[1] == {"pageSize": "2", "nextPageToken": "c2"}
        assert upstream.calls[2] == {"pageSize": "2", "nextPageToken": "c3"}
        assert envelope.metadata.page == 3

    def test_past_the_end(self):
        """A walk past k pages stops after exactly k fetches."""
        upstream = FakeUpstream(pages=3)
        envelope, trace = PaginationWalker(upstream).walk_traced(10, page_size=2)
        assert len(upstream.calls) == 3
        assert trace.fetch_count == 3
        assert trace.state is WalkState.DONE
        assert envelope.metadata.page == 3
        assert envelope.records

    def test_empty_page_stops(self):
        """An empty page ends the walk even with a cursor."""

        def fetch_page(params):
            return resolve_members({"members": [], "nextPageToken": "again"})

        envelope, trace = PaginationWalker(fetch_page).walk_traced(4, page_size=2)
        assert trace.fetch_count == 1
        assert envelope.records == []

    def test_invalid_member_id_does_not_stop_walk(self):
        """A page holding a malformed memberId still yields its cursor."""
        calls = []

        def fetch_page(params):
            calls.append(params)
            if "nextPageToken" in params:
                return resolve_members(members_page(["TKT4"], page_size=3))
            return resolve_members(members_page(["TKT1", "abc123", "TKT3"], next_token="c2", page_size=3))

        envelope = PaginationWalker(fetch_page).walk(2, page_size=3)
        assert len(calls) == 2
        assert envelope.records[0].member_id == "TKT4"

    def test_constant_page_size_and_filters(self):
        """Every fetch in a walk sends the same pageSize and filters."""
        upstream = FakeUpstream(pages=4)
        PaginationWalker(upstream).walk(4, page_size=2, filters={"campus": "West Campus"})
        assert {call["pageSize"] for call in upstream.calls} == {"2"}
        assert all(call["campus"] == "West Campus" for call in upstream.calls)

    def test_default_page_size(self, monkeypatch):
        """The page size defaults to configuration."""
        from congregation.config import config

        monkeypatch.setattr(config, "page_size", 25)
        upstream = FakeUpstream(pages=1)
        PaginationWalker(upstream).walk()
        assert upstream.calls[0]["pageSize"] == "25"


class TestExplicitCursor:
    """Tests for walks started from a cursor."""

    def test_cursor_wins(self):
        """An explicit cursor is one fetch, regardless of target page."""
        upstream = FakeUpstream(pages=5)
        envelope, trace = PaginationWalker(upstream).walk_traced(1, page_size=2, cursor="c4")
        assert upstream.calls == [{"pageSize": "2", "nextPageToken": "c4"}]
        assert envelope.metadata.page == 4
        assert trace.state is WalkState.DONE


class TestWalkErrors:
    """Tests for errors during a walk."""

    def test_error_envelope_stops(self):
        """An error envelope is returned as is and ends the walk."""
        upstream = FakeUpstream(pages=5, error_on_page=2)
        envelope, trace = PaginationWalker(upstream).walk_traced(4, page_size=2)
        assert envelope.error is True
        assert envelope.message == "page 2 failed"
        assert trace.state is WalkState.ERROR
        assert len(upstream.calls) == 2

    def test_fetch_failure_propagates(self):
        """Transport failures propagate immediately."""

        def fetch_page(params):
            raise ServiceUnavailableError("upstream down")

        with pytest.raises(ServiceUnavailableError, match="upstream down"):
            PaginationWalker(fetch_page).walk(3, page_size=2)

    @pytest.mark.parametrize("target,size", [(0, 2), (1, 0), (-1, 10)])
    def test_invalid_arguments(self, target, size):
        """Non-positive targets or page sizes are rejected before fetching."""
        upstream = FakeUpstream(pages=1)
        with pytest.raises(ValueError, match="must be >= 1"):
            PaginationWalker(upstream).walk(target, page_size=size)
        assert upstream.calls == []


class TestIndependentWalks:
    """Tests for walks sharing a walker."""

    def test_no_state_between_walks(self):
        """A second walk starts again from page 1."""
        upstream = FakeUpstream(pages=3)
        walker = PaginationWalker(upstream)
        walker.walk(3, page_size=2)
        upstream.calls.clear()
        walker.walk(2, page_size=2)
        assert upstream.calls[0] == {"pageSize": "2", "pageNumber": "1"}
        assert len(upstream.calls) == 2
