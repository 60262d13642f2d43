"""Record layer: typed members and seekers from upstream JSON.

This module provides:
- Picklist enums with strict/lenient normalization
- MemberID validation
- Key-fallback field reading and record decoding/encoding
- Response envelope resolution (error, paginated, legacy shapes)
- Field-expansion projection
- Derived values (age, age group, anniversaries, photo)

Pure functions over JSON; no network access.
"""

from congregation.records.decoder import decode_member, decode_seeker, encode_member, encode_seeker
from congregation.records.envelope import (
    Envelope,
    EnvelopeResolver,
    PageMetadata,
    member_resolver,
    resolve_members,
    resolve_seekers,
    seeker_resolver,
)
from congregation.records.errors import (
    CongregationError,
    EnumDecodeError,
    InvalidMemberIDError,
    MemberNotFoundError,
    RecordDecodeError,
    SeekerNotFoundError,
    UpstreamError,
)
from congregation.records.expand import MemberExpand, expansion_param, project
from congregation.records.fields import FieldReader, RawRecord
from congregation.records.ids import MemberID, normalize_member_id, parse_member_id
from congregation.records.models import (
    ContactInformation,
    DiscipleshipInformation,
    EmploymentInformation,
    Lead,
    MaritalInformation,
    Member,
    Seeker,
)
from congregation.records.photo import MemberPhoto, parse_photo

__all__ = [
    # Models
    "Member",
    "Seeker",
    "Lead",
    "ContactInformation",
    "EmploymentInformation",
    "MaritalInformation",
    "DiscipleshipInformation",
    "MemberPhoto",
    # Identifiers
    "MemberID",
    "parse_member_id",
    "normalize_member_id",
    # Decoding
    "RawRecord",
    "FieldReader",
    "decode_member",
    "decode_seeker",
    "encode_member",
    "encode_seeker",
    "parse_photo",
    # Envelopes
    "Envelope",
    "EnvelopeResolver",
    "PageMetadata",
    "member_resolver",
    "seeker_resolver",
    "resolve_members",
    "resolve_seekers",
    # Expansion
    "MemberExpand",
    "expansion_param",
    "project",
    # Errors
    "CongregationError",
    "RecordDecodeError",
    "EnumDecodeError",
    "InvalidMemberIDError",
    "UpstreamError",
    "MemberNotFoundError",
    "SeekerNotFoundError",
]
