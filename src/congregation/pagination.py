"""Reaching page N of a cursor-only list endpoint.

The upstream list endpoints hand back a nextPageToken but offer no random
access, so page N costs N sequential fetches: page 1 by number, then one
fetch per cursor. Records from pages before N are discarded.

A walk stops early (and returns the last envelope it fetched) when a page
comes back empty, without a next cursor, or as an error envelope. Callers
compare the returned page with what they asked for to detect exhaustion.

Cursors are only valid for the page size they were issued under, so one
walk sends the same pageSize (and filters) on every request. Walks keep no
state between calls.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from congregation.config import config
from congregation.records.envelope import Envelope

logger = logging.getLogger(__name__)

FetchPage = Callable[[Dict[str, str]], Envelope]


class WalkState(str, Enum):
    """Where a walk is."""

    FETCH_PAGE = "fetch_page"
    HAVE_CURSOR = "have_cursor"
    DONE = "done"
    ERROR = "error"


@dataclass
class WalkStep:
    """One fetch performed during a walk."""

    page: int
    params: Dict[str, str]
    record_count: int
    next_page_token: Optional[str]


@dataclass
class WalkTrace:
    """Local state for a single walk; discarded when the walk returns."""

    target_page: int
    page_size: int
    state: WalkState = WalkState.FETCH_PAGE
    cursor: Optional[str] = None
    steps: List[WalkStep] = field(default_factory=list)

    @property
    def fetch_count(self) -> int:
        return len(self.steps)


class PaginationWalker:
    """Walks cursor chains to reach a target page.

    Args:
        fetch_page: Performs one raw fetch with the given query parameters and
            resolves it into an Envelope; errors it raises propagate
    """

    def __init__(self, fetch_page: FetchPage):
        self.fetch_page = fetch_page

    def _params(
        self,
        page_size: int,
        filters: Optional[Dict[str, str]],
        page_number: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> Dict[str, str]:
        params: Dict[str, str] = dict(filters or {})
        params["pageSize"] = str(page_size)
        if cursor is not None:
            params["nextPageToken"] = cursor
        elif page_number is not None:
            params["pageNumber"] = str(page_number)
        return params

    def _fetch(self, trace: WalkTrace, page: int, params: Dict[str, str]) -> Envelope:
        trace.state = WalkState.FETCH_PAGE
        envelope = self.fetch_page(params)
        trace.steps.append(
            WalkStep(
                page=page,
                params=params,
                record_count=len(envelope.records),
                next_page_token=envelope.next_page_token,
            )
        )
        logger.debug(
            f"Fetched page {page}: {len(envelope.records)} records, "
            f"next cursor {'present' if envelope.next_page_token else 'absent'}"
        )
        return envelope

    def walk(
        self,
        target_page: int = 1,
        page_size: Optional[int] = None,
        filters: Optional[Dict[str, str]] = None,
        cursor: Optional[str] = None,
    ) -> Envelope:
        """Fetch the envelope for target_page, or for an explicit cursor.

        See walk_traced() for arguments.
        """
        envelope, _ = self.walk_traced(target_page, page_size, filters, cursor)
        return envelope

    def walk_traced(
        self,
        target_page: int = 1,
        page_size: Optional[int] = None,
        filters: Optional[Dict[str, str]] = None,
        cursor: Optional[str] = None,
    ) -> Tuple[Envelope, WalkTrace]:
        """Fetch the envelope for target_page, or for an explicit cursor.

        Args:
            target_page: 1-based page number to reach
            page_size: Records per page, constant for the whole walk
                (defaults to config.page_size)
            filters: Extra query parameters sent with every fetch
            cursor: Explicit nextPageToken; skips walking when given

        Returns:
            (envelope, trace): the target page's envelope, or the last one
            fetched if upstream ran out of pages (or answered with an error)
            first, plus the steps taken

        Raises:
            ValueError: If target_page or page_size is less than 1
        """
        size = page_size if page_size is not None else config.page_size
        if target_page < 1:
            raise ValueError(f"target_page must be >= 1, got {target_page}")
        if size < 1:
            raise ValueError(f"page_size must be >= 1, got {size}")

        trace = WalkTrace(target_page=target_page, page_size=size)

        if cursor is not None:
            trace.cursor = cursor
            trace.state = WalkState.HAVE_CURSOR
            envelope = self._fetch(trace, target_page, self._params(size, filters, cursor=cursor))
            trace.state = WalkState.ERROR if envelope.error else WalkState.DONE
            return envelope, trace

        logger.info(f"Walking to page {target_page} (page size {size})")
        page = 1
        envelope = self._fetch(trace, page, self._params(size, filters, page_number=1))

        while page < target_page:
            if envelope.error:
                trace.state = WalkState.ERROR
                logger.info(f"Walk stopped at page {page}: upstream error")
                return envelope, trace
            if not envelope.records or not envelope.next_page_token:
                trace.state = WalkState.DONE
                logger.info(
                    f"Walk stopped at page {page} of {target_page}: no more pages"
                )
                return envelope, trace

            trace.cursor = envelope.next_page_token
            trace.state = WalkState.HAVE_CURSOR
            page += 1
            envelope = self._fetch(trace, page, self._params(size, filters, cursor=trace.cursor))

        trace.state = WalkState.ERROR if envelope.error else WalkState.DONE
        return envelope, trace
