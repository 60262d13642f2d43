"""Two-phase field resolution for upstream records.

Phase one (RawRecord.parse) turns a JSON object into a loosely typed map,
with nulls dropped. Phase two (FieldReader) resolves each logical field
from an ordered list of candidate keys:

- the first candidate that is present and coerces cleanly wins
- a coercion failure on one candidate falls through to the next
- if nothing resolves, the field is None, or RecordDecodeError when the
  caller marked the field as required

Date coercion tries several formats in order; see DATETIME_FORMATS and
DATE_FORMATS.
"""

import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Type

from congregation.records.enums import P
from congregation.records.errors import RecordDecodeError

logger = logging.getLogger(__name__)

# ISO-8601, with fractional seconds first
DATETIME_FORMATS = [
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S",
]

# Plain date first, then the legacy day-month-year form
DATE_FORMATS = ["%Y-%m-%d", "%d%m%Y"]

WIRE_DATE_FORMAT = "%Y-%m-%d"


# =============================================================================
# Coercion
# =============================================================================


def as_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f"expected string, got {type(value).__name__}")


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise TypeError(f"expected boolean, got {value!r}")


def as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("expected integer, got boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"expected integer, got {value!r}")


def as_string_list(value: Any) -> List[str]:
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise TypeError(f"expected list of strings, got {value!r}")


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Raises:
        ValueError: If no format matches
    """
    text = as_string(value).strip()
    for fmt in DATETIME_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise ValueError(f"unrecognized datetime {text!r}")


def parse_date(value: Any) -> date:
    """Parse a calendar date (yyyy-MM-dd, ddMMyyyy, or an ISO timestamp).

    Raises:
        ValueError: If no format matches
    """
    text = as_string(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return parse_datetime(text).date()
    except ValueError:
        raise ValueError(f"unrecognized date {text!r}") from None


def format_date(value: Optional[date]) -> Optional[str]:
    return value.strftime(WIRE_DATE_FORMAT) if value else None


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """Render a timestamp the way the upstream API does (millisecond precision)."""
    if value is None:
        return None
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


# =============================================================================
# Phase one: raw record
# =============================================================================


class RawRecord:
    """Loosely typed view of one upstream JSON object."""

    def __init__(self, values: Dict[str, Any]):
        self._values = {key: value for key, value in values.items() if value is not None}

    @classmethod
    def parse(cls, payload: Any) -> "RawRecord":
        """Build a RawRecord from a dict or JSON text.

        Raises:
            RecordDecodeError: If the payload is not a JSON object
        """
        if isinstance(payload, RawRecord):
            return payload
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError as e:
                raise RecordDecodeError(f"Record is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise RecordDecodeError(
                f"Record must be a JSON object, got {type(payload).__name__}"
            )
        return cls(payload)

    def has(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def keys(self) -> List[str]:
        return list(self._values)

    def __len__(self) -> int:
        return len(self._values)


# =============================================================================
# Phase two: field reader
# =============================================================================


class FieldReader:
    """Resolves logical fields from a RawRecord with key fallback."""

    def __init__(self, record: RawRecord, required: Iterable[str] = ()):
        """Initialize the reader.

        Args:
            record: Parsed upstream record
            required: Logical field names that must resolve to a value
        """
        self.record = record
        self.required: Set[str] = set(required)
        self.touched: Set[str] = set()

    def read(
        self,
        field: str,
        *keys: str,
        coerce: Optional[Callable[[Any], Any]] = None,
        required: bool = False,
    ) -> Any:
        """Resolve a logical field from candidate keys in priority order.

        Args:
            field: Logical field name (used for errors and presence tracking)
            *keys: Upstream keys to try; defaults to the field name itself
            coerce: Conversion applied to a candidate value; ValueError or
                TypeError moves on to the next candidate
            required: Treat this field as required for this call

        Returns:
            The first successfully coerced value, or None

        Raises:
            RecordDecodeError: If the field is required and nothing resolved
        """
        candidates = keys or (field,)
        for key in candidates:
            if not self.record.has(key):
                continue
            value = self.record.get(key)
            if coerce is not None:
                try:
                    value = coerce(value)
                except (ValueError, TypeError) as e:
                    logger.debug(f"Ignoring '{key}' for field '{field}': {e}")
                    continue
            if value is None:
                continue
            self.touched.add(field)
            return value

        if required or field in self.required:
            raise RecordDecodeError(
                f"Required field '{field}' is missing or malformed",
                field=field,
                details={"keys": list(candidates)},
            )
        return None

    def string(self, field: str, *keys: str) -> Optional[str]:
        return self.read(field, *keys, coerce=as_string)

    def string_list(self, field: str, *keys: str) -> Optional[List[str]]:
        return self.read(field, *keys, coerce=as_string_list)

    def boolean(self, field: str, *keys: str) -> Optional[bool]:
        return self.read(field, *keys, coerce=as_bool)

    def integer(self, field: str, *keys: str) -> Optional[int]:
        return self.read(field, *keys, coerce=as_int)

    def timestamp(self, field: str, *keys: str) -> Optional[datetime]:
        return self.read(field, *keys, coerce=parse_datetime)

    def calendar_date(self, field: str, *keys: str) -> Optional[date]:
        return self.read(field, *keys, coerce=parse_date)

    def enum(self, field: str, enum_cls: Type[P], *keys: str) -> Optional[P]:
        """Resolve a picklist field.

        Strict enums that do not match fall through like any other coercion
        failure; lenient enums resolve to UNKNOWN.
        """
        return self.read(field, *keys, coerce=enum_cls.normalize)

    def present(self, *fields: str) -> bool:
        """Check whether any of the logical fields resolved to a value."""
        return any(field in self.touched for field in fields)
