"""Member identifier validation.

Member identifiers look like "TKT123456": the fixed prefix "TKT" followed
by the member number. Input is accepted with any prefix case; the canonical
form upper-cases the prefix and keeps the rest exactly as given.

Invalid identifiers are rejected here, before any request is built.
"""

from typing import Any, Optional

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from congregation.records.errors import InvalidMemberIDError

MEMBER_ID_PREFIX = "TKT"


def parse_member_id(raw: Any) -> str:
    """Validate and canonicalize a member identifier.

    Args:
        raw: Identifier as supplied by a caller or the upstream payload

    Returns:
        Canonical identifier, e.g. "TKT123456"

    Raises:
        InvalidMemberIDError: If raw is not a string, is shorter than the
            prefix, or does not start with the prefix
    """
    if not isinstance(raw, str):
        raise InvalidMemberIDError("MemberID must be a string", raw_value=raw)
    if len(raw) < len(MEMBER_ID_PREFIX):
        raise InvalidMemberIDError(
            f"MemberID must be at least {len(MEMBER_ID_PREFIX)} characters", raw_value=raw
        )
    head = raw[: len(MEMBER_ID_PREFIX)]
    if head.upper() != MEMBER_ID_PREFIX:
        raise InvalidMemberIDError(
            f"MemberID must start with '{MEMBER_ID_PREFIX}'", raw_value=raw
        )
    return MEMBER_ID_PREFIX + raw[len(MEMBER_ID_PREFIX):]


def normalize_member_id(raw: Any) -> Optional[str]:
    """Canonicalize a member identifier, or None if it is invalid."""
    try:
        return parse_member_id(raw)
    except InvalidMemberIDError:
        return None


def is_valid_member_id(raw: Any) -> bool:
    """Check whether raw would be accepted as a member identifier."""
    return normalize_member_id(raw) is not None


class MemberID(str):
    """A validated, canonical member identifier.

    Constructing one normalizes the prefix; invalid input raises
    InvalidMemberIDError. Usable directly as a pydantic field type.
    """

    def __new__(cls, raw: Any) -> "MemberID":
        return super().__new__(cls, parse_member_id(raw))

    @property
    def number(self) -> str:
        """The part after the prefix."""
        return self[len(MEMBER_ID_PREFIX):]

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.str_schema(),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )
