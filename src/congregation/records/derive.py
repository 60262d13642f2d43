"""Values derived from stored record fields.

Everything here is a pure function of its inputs (plus "today", which can be
passed explicitly). Records never store these results; they call into this
module on each access so nothing goes stale.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Tuple, Union

from congregation.records.enums import Occupation, OccupationSubCategory

DateLike = Union[date, datetime]

# (exclusive upper bound, label); the last bucket is open-ended
AGE_GROUPS: List[Tuple[Optional[int], str]] = [
    (18, "0-17"),
    (26, "18-25"),
    (36, "26-35"),
    (46, "36-45"),
    (56, "46-55"),
    (None, "56+"),
]


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def _today(today: Optional[date]) -> date:
    return today if today is not None else date.today()


def compute_age(born: DateLike, today: Optional[date] = None) -> int:
    """Whole years between born and today.

    One year is subtracted when today's month/day is earlier than the birth
    month/day (the birthday has not happened yet this year).
    """
    born = _as_date(born)
    today = _today(today)
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years


def age_group(age: int) -> str:
    """Bucket label for an age."""
    for upper, label in AGE_GROUPS:
        if upper is None or age < upper:
            return label
    return AGE_GROUPS[-1][1]


def occurrence_in(value: DateLike, year: int) -> date:
    """The month/day of value in the given year (Feb 29 -> Feb 28 off leap years)."""
    value = _as_date(value)
    try:
        return value.replace(year=year)
    except ValueError:
        return date(year, 2, 28)


def next_occurrence(value: DateLike, today: Optional[date] = None) -> date:
    """This year's occurrence if it is today or later, else next year's."""
    today = _today(today)
    this_year = occurrence_in(value, today.year)
    if this_year >= today:
        return this_year
    return occurrence_in(value, today.year + 1)


def days_until_next(value: DateLike, today: Optional[date] = None) -> int:
    today = _today(today)
    return (next_occurrence(value, today) - today).days


def occurs_today(value: DateLike, today: Optional[date] = None) -> bool:
    """Whether the month/day of value matches today."""
    today = _today(today)
    return occurrence_in(value, today.year) == today


@dataclass(frozen=True)
class DateInfo:
    """Calendar helpers over a stored birth or anniversary date."""

    value: date

    @property
    def year(self) -> int:
        return self.value.year

    @property
    def month(self) -> int:
        return self.value.month

    @property
    def day(self) -> int:
        return self.value.day

    def years_since(self, today: Optional[date] = None) -> int:
        return compute_age(self.value, today)

    def days_until_next(self, today: Optional[date] = None) -> int:
        return days_until_next(self.value, today)

    def next_occurrence(self, today: Optional[date] = None) -> date:
        return next_occurrence(self.value, today)

    def is_today(self, today: Optional[date] = None) -> bool:
        return occurs_today(self.value, today)

    def is_upcoming(self, within_days: int = 30, today: Optional[date] = None) -> bool:
        """Whether the next occurrence falls within the given number of days."""
        return self.days_until_next(today) <= within_days


def date_info(value: Optional[DateLike]) -> Optional[DateInfo]:
    return DateInfo(_as_date(value)) if value is not None else None


# =============================================================================
# Names
# =============================================================================


def split_full_name(full_name: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split a full name into (first, last) on whitespace.

    The first token is the first name; the remaining tokens, joined by a
    single space, are the last name.
    """
    if not full_name:
        return None, None
    tokens = full_name.split()
    if not tokens:
        return None, None
    last = " ".join(tokens[1:]) or None
    return tokens[0], last


def join_name(*parts: Optional[str]) -> Optional[str]:
    """Join the non-empty name components with single spaces."""
    present = [part.strip() for part in parts if part and part.strip()]
    return " ".join(present) if present else None


# =============================================================================
# Occupation
# =============================================================================


def lookup_sub_category(raw: Optional[str]) -> Optional[OccupationSubCategory]:
    """Picklist value for a raw subcategory string, if it is a known one."""
    if raw is None:
        return None
    try:
        return OccupationSubCategory.normalize(raw)
    except ValueError:
        return None


def infer_occupation(
    occupation: Optional[Occupation], sub_category: Optional[str]
) -> Optional[Occupation]:
    """The stated occupation, else the first occupation listing the subcategory."""
    if occupation is not None:
        return occupation
    sub = lookup_sub_category(sub_category)
    if sub is None:
        return None
    for candidate in Occupation:
        if sub in candidate.subcategories:
            return candidate
    return None
