"""Response envelopes: classifying upstream list responses.

Upstream list endpoints answer in one of three shapes:

- error:     {"success": false, "message": "..."}
- paginated: {"members": [...], "pageSize": 50, "nextPageToken": "..."}
- legacy:    {"member": [...]}

EnvelopeResolver tries them in that order and never fails the whole
response because a records key is missing or undecodable; it returns an
empty envelope instead.
"""

import logging
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from congregation.records.decoder import (
    decode_member,
    decode_seeker,
    encode_member,
    encode_seeker,
)
from congregation.records.errors import CongregationError
from congregation.records.expand import ExpansionRequest, project
from congregation.records.fields import RawRecord, as_int, as_string
from congregation.records.models import Member, Seeker

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Wire key -> PageMetadata attribute
PAGINATION_KEYS = {
    "pageSize": "per",
    "totalRecords": "total",
    "pageNumber": "page",
    "nextPageToken": "next_page_token",
    "previousPageToken": "previous_page_token",
}


class PageMetadata(BaseModel):
    """Pagination fields found at the top level of an envelope."""

    per: Optional[int] = Field(None, description="Page size (pageSize)")
    total: Optional[int] = Field(None, description="Total record count (totalRecords)")
    page: Optional[int] = Field(None, description="Current page (pageNumber)")
    next_page_token: Optional[str] = None
    previous_page_token: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class Envelope(BaseModel, Generic[T]):
    """Records from one upstream response plus pagination/error metadata."""

    records: List[T] = Field(default_factory=list)
    metadata: Optional[PageMetadata] = None
    error: bool = False
    message: Optional[str] = None
    success: Optional[bool] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def error_envelope(cls, message: Optional[str]) -> "Envelope[T]":
        """Envelope for an upstream failure: no records, error set."""
        return cls(records=[], error=True, message=message, success=False)

    @property
    def is_paginated(self) -> bool:
        return self.metadata is not None

    @property
    def next_page_token(self) -> Optional[str]:
        return self.metadata.next_page_token if self.metadata else None

    @property
    def previous_page_token(self) -> Optional[str]:
        return self.metadata.previous_page_token if self.metadata else None

    @property
    def pagination_info(self) -> Optional[Dict[str, int]]:
        """per/total/page with missing values as 0, or None if unpaginated."""
        if self.metadata is None:
            return None
        return {
            "per": self.metadata.per or 0,
            "total": self.metadata.total or 0,
            "page": self.metadata.page or 0,
        }

    def project(self, requested: ExpansionRequest) -> "Envelope[T]":
        """Apply field expansion to every record, keeping metadata."""
        if requested is None:
            return self
        return self.model_copy(update={"records": [project(r, requested) for r in self.records]})


class EnvelopeResolver(Generic[T]):
    """Classifies raw payloads and decodes their records."""

    def __init__(
        self,
        records_key: str,
        legacy_key: str,
        decode: Callable[[Any], T],
        encode: Optional[Callable[[T], Dict[str, Any]]] = None,
    ):
        """Initialize the resolver.

        Args:
            records_key: Key holding records in the paginated shape
            legacy_key: Key holding records in the legacy flat shape
            decode: Per-record decoder
            encode: Per-record encoder used by to_payload()
        """
        self.records_key = records_key
        self.legacy_key = legacy_key
        self.decode = decode
        self.encode = encode

    def resolve(self, payload: Any) -> Envelope[T]:
        """Classify a raw payload and build an Envelope.

        Args:
            payload: Top-level JSON object (dict or text)

        Returns:
            Error, paginated, legacy, or empty-records envelope
        """
        raw = RawRecord.parse(payload)
        message = self._message(raw)

        if raw.get("success") is False or raw.get("error") is True:
            logger.info(f"Upstream error envelope: {message}")
            return Envelope.error_envelope(message)

        records = self._decode_records(raw, self.records_key)
        if records is None:
            records = self._decode_records(raw, self.legacy_key)
        if records is None:
            logger.warning(
                f"No decodable '{self.records_key}' or '{self.legacy_key}' records; "
                "returning empty envelope"
            )
            records = []

        success = raw.get("success")
        return Envelope(
            records=records,
            metadata=self._metadata(raw),
            error=False,
            message=message,
            success=success if isinstance(success, bool) else None,
        )

    def _decode_records(self, raw: RawRecord, key: str) -> Optional[List[T]]:
        """Decode every record under key, or None if that is not possible."""
        items = raw.get(key)
        if items is None:
            return None
        if not isinstance(items, list):
            logger.warning(f"'{key}' is not a list ({type(items).__name__}); ignoring")
            return None
        try:
            return [self.decode(item) for item in items]
        except CongregationError as e:
            logger.warning(f"Could not decode '{key}' records: {e}")
            return None

    @staticmethod
    def _message(raw: RawRecord) -> Optional[str]:
        value = raw.get("message")
        try:
            return as_string(value) if value is not None else None
        except TypeError:
            return None

    @staticmethod
    def _metadata(raw: RawRecord) -> Optional[PageMetadata]:
        if not any(raw.has(key) for key in PAGINATION_KEYS):
            return None
        values: Dict[str, Any] = {}
        for key, attribute in PAGINATION_KEYS.items():
            value = raw.get(key)
            if value is None:
                continue
            coerce = as_string if attribute.endswith("token") else as_int
            try:
                values[attribute] = coerce(value)
            except (TypeError, ValueError):
                logger.debug(f"Ignoring malformed pagination key '{key}': {value!r}")
        return PageMetadata(**values)

    def to_payload(self, envelope: Envelope[T]) -> Dict[str, Any]:
        """Encode an envelope in the current paginated wire shape."""
        if envelope.error:
            return {"success": False, "message": envelope.message}
        if self.encode is None:
            raise TypeError("Resolver has no record encoder")
        payload: Dict[str, Any] = {self.records_key: [self.encode(r) for r in envelope.records]}
        if envelope.metadata is not None:
            for key, attribute in PAGINATION_KEYS.items():
                value = getattr(envelope.metadata, attribute)
                if value is not None:
                    payload[key] = value
        if envelope.success is not None:
            payload["success"] = envelope.success
        if envelope.message is not None:
            payload["message"] = envelope.message
        return payload


member_resolver: EnvelopeResolver[Member] = EnvelopeResolver(
    "members", "member", decode_member, encode_member
)
seeker_resolver: EnvelopeResolver[Seeker] = EnvelopeResolver(
    "seekers", "seeker", decode_seeker, encode_seeker
)


def resolve_members(payload: Any) -> Envelope[Member]:
    return member_resolver.resolve(payload)


def resolve_seekers(payload: Any) -> Envelope[Seeker]:
    return seeker_resolver.resolve(payload)
