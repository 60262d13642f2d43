"""Error hierarchy for record decoding and record-level operations.

Transport failures live in congregation.connectors.base (ConnectorError).
Everything raised while turning upstream JSON into typed records, or while
validating caller-supplied identifiers, derives from CongregationError.
"""

from typing import Any, Dict, Optional


class CongregationError(Exception):
    """Base exception for record-layer errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RecordDecodeError(CongregationError):
    """A mandatory field could not be resolved from the payload."""

    def __init__(
        self,
        message: str,
        field: str = "",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, {"field": field, **(details or {})})
        self.field = field


class EnumDecodeError(CongregationError, ValueError):
    """Value is not an accepted spelling of a strict enum."""

    def __init__(self, enum_name: str, value: Any):
        super().__init__(
            f"Cannot initialize {enum_name} from invalid value {value!r}",
            {"enum": enum_name, "value": value},
        )
        self.enum_name = enum_name
        self.value = value


class InvalidMemberIDError(CongregationError, ValueError):
    """Caller-supplied member identifier failed validation."""

    def __init__(self, message: str, raw_value: Any = None):
        super().__init__(message, {"raw_value": raw_value})
        self.raw_value = raw_value


class UpstreamError(CongregationError):
    """The upstream API answered with an explicit error envelope."""

    pass


class MemberNotFoundError(CongregationError):
    """No member record was returned for the requested identifier."""

    def __init__(self, message: str = "Member not found", member_id: str = ""):
        super().__init__(message, {"member_id": member_id})
        self.member_id = member_id


class SeekerNotFoundError(CongregationError):
    """No seeker record was returned for the requested identifier."""

    def __init__(self, message: str = "Seeker not found", identifier: str = ""):
        super().__init__(message, {"identifier": identifier})
        self.identifier = identifier
