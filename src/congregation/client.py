"""Typed client for the member and seeker Apex REST endpoints.

    client = CongregationClient(HTTPFetcher(), EnvironmentCredentials())
    page = client.members.fetch_all(page_number=3, expanded=["contactInformation"])
    member = client.members.fetch("tkt123456")

Each operation asks the credential provider for (token, instance URL),
performs raw fetches, resolves envelopes, decodes records and applies field
expansion. List operations reach page N through the PaginationWalker.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from congregation.config import config
from congregation.connectors.base import CredentialProvider, RawFetcher
from congregation.connectors.credentials import EnvironmentCredentials
from congregation.connectors.http_client import HTTPFetcher
from congregation.pagination import PaginationWalker
from congregation.records.envelope import Envelope, resolve_members, resolve_seekers
from congregation.records.enums import Picklist
from congregation.records.errors import MemberNotFoundError, SeekerNotFoundError, UpstreamError
from congregation.records.expand import ExpansionRequest, expansion_param, project
from congregation.records.ids import MemberID
from congregation.records.models import Member, Seeker

logger = logging.getLogger(__name__)

# Paths below the Apex REST prefix
MEMBERS_LEGACY_PATH = "/api/member"
MEMBERS_PATH = "/members"
SEEKERS_PATH = "/seekers"


@dataclass
class SeekerFilters:
    """Optional seeker list filters; None values are not sent."""

    seeker_id: Optional[str] = None
    name: Optional[str] = None
    campus: Any = None
    lead_status: Any = None
    email: Optional[str] = None
    lead_id: Optional[str] = None
    contact_number: Optional[str] = None

    # Attribute -> query parameter
    PARAMS = {
        "seeker_id": "seekerId",
        "name": "name",
        "campus": "campus",
        "lead_status": "leadStatus",
        "email": "email",
        "lead_id": "leadId",
        "contact_number": "contactNumber",
    }

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            params[self.PARAMS[f.name]] = value.to_wire() if isinstance(value, Picklist) else str(value)
        return params


class _Handler:
    """Shared request plumbing for the entity handlers."""

    def __init__(self, client: "CongregationClient"):
        self.client = client

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        access_token, instance_url = self.client.credentials.get_credentials()
        url = f"{instance_url}{self.client.api_prefix}{path}"
        logger.debug(f"GET {url} params={params or {}}")
        return self.client.fetcher.fetch(url, "GET", params=params, access_token=access_token)


class MembersHandler(_Handler):
    """Member operations."""

    def fetch_all(
        self,
        page_number: int = 1,
        page_size: Optional[int] = None,
        expanded: ExpansionRequest = None,
        next_page_token: Optional[str] = None,
    ) -> Envelope[Member]:
        """Fetch one page of members.

        Args:
            page_number: Page to reach by walking cursors from page 1
            page_size: Records per page (default from config)
            expanded: Expansion groups to keep; None keeps all
            next_page_token: Explicit cursor; takes priority over page_number

        Returns:
            Envelope of members with pagination metadata
        """
        filters: Dict[str, str] = {}
        expand = expansion_param(expanded)
        if expand:
            filters["expand"] = expand

        walker = PaginationWalker(lambda params: resolve_members(self._get(MEMBERS_PATH, params)))
        envelope = walker.walk(page_number, page_size, filters, next_page_token)
        return envelope.project(expanded)

    def fetch(self, member_id: Any, expanded: ExpansionRequest = None) -> Member:
        """Fetch one member by TKT identifier.

        Raises:
            InvalidMemberIDError: Before any request, if member_id is invalid
            UpstreamError: If upstream answers with an error envelope
            MemberNotFoundError: If no record comes back
        """
        canonical = MemberID(member_id)
        params: Dict[str, str] = {}
        expand = expansion_param(expanded)
        if expand:
            params["expand"] = expand

        envelope = resolve_members(self._get(f"{MEMBERS_PATH}/{canonical}", params or None))
        if envelope.error:
            raise UpstreamError(envelope.message or "Member request failed")
        if not envelope.records:
            raise MemberNotFoundError(member_id=str(canonical))
        return project(envelope.records[0], expanded)

    def fetch_legacy(self) -> Envelope[Member]:
        """Fetch members from the unpaginated v1 endpoint."""
        return resolve_members(self._get(MEMBERS_LEGACY_PATH))


class SeekersHandler(_Handler):
    """Seeker operations."""

    def fetch_all(
        self,
        page_number: int = 1,
        page_size: Optional[int] = None,
        filters: Optional[SeekerFilters] = None,
        next_page_token: Optional[str] = None,
    ) -> Envelope[Seeker]:
        """Fetch one page of seekers, optionally filtered.

        Filters are sent unchanged with every request of the walk.
        """
        params = filters.to_params() if filters else {}
        walker = PaginationWalker(lambda p: resolve_seekers(self._get(SEEKERS_PATH, p)))
        return walker.walk(page_number, page_size, params, next_page_token)

    def fetch(self, identifier: str) -> Seeker:
        """Fetch one seeker by record id or lead id.

        Raises:
            UpstreamError: If upstream answers with an error envelope
            SeekerNotFoundError: If no record comes back
        """
        if not identifier or not identifier.strip():
            raise ValueError("Seeker identifier must not be empty")
        envelope = resolve_seekers(self._get(f"{SEEKERS_PATH}/{identifier.strip()}"))
        if envelope.error:
            raise UpstreamError(envelope.message or "Seeker request failed")
        if not envelope.records:
            raise SeekerNotFoundError(identifier=identifier)
        return envelope.records[0]


class CongregationClient:
    """Entry point: members and seekers over one fetcher and credential source."""

    def __init__(
        self,
        fetcher: Optional[RawFetcher] = None,
        credentials: Optional[CredentialProvider] = None,
        api_prefix: Optional[str] = None,
    ):
        """Initialize the client.

        Args:
            fetcher: RawFetcher (default: HTTPFetcher)
            credentials: CredentialProvider (default: EnvironmentCredentials)
            api_prefix: Apex REST prefix (default from config)
        """
        self.fetcher = fetcher or HTTPFetcher()
        self.credentials = credentials or EnvironmentCredentials()
        self.api_prefix = (api_prefix or config.api_prefix).rstrip("/")
        self.members = MembersHandler(self)
        self.seekers = SeekersHandler(self)
