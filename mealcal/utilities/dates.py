"""Calendar helpers: week boundaries, date keys and week ids.

Weeks run Sunday..Saturday. A date key (``YYYY-MM-DD``) is the identity of a
calendar day everywhere in the planner; time-of-day never matters.

The week id (``YYYY-NN``) uses an ad hoc numbering, not ISO-8601:

    NN = ceil((day_of_week(Jan 1) + 1 + days_since_jan1(d)) / 7)

Stored plans are looked up by this value, so the formula must stay as it is,
including its quirks around Dec 31 / Jan 1.
"""
import math
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from mealcal.domain.errors import ValidationError
from mealcal.utilities.constants import DATE_KEY_FORMAT, DAYS_PER_WEEK

DateLike = Union[date, datetime, str]

__all__ = [
    "as_date", "day_of_week", "week_start", "week_end", "week_dates", "date_key",
    "parse_date_key", "week_id", "date_range_includes", "date_range",
    "weeks_in_range", "is_same_day",
]


def as_date(value: DateLike) -> date:
    """Truncate a date, datetime or ``YYYY-MM-DD`` string to its calendar day."""
    if isinstance(value, datetime):
        # datetime is a date subclass, check it first
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date_key(value)
    raise ValidationError(f"Expected a date, got {type(value).__name__}")


def parse_date_key(value: str) -> date:
    text = (value or "").strip()
    # Accept full ISO timestamps by keeping the day part only
    if "T" in text:
        text = text.split("T", 1)[0]
    try:
        return datetime.strptime(text, DATE_KEY_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD") from None


def day_of_week(value: DateLike) -> int:
    """Sunday=0 .. Saturday=6."""
    return (as_date(value).weekday() + 1) % 7


def week_start(value: DateLike) -> date:
    d = as_date(value)
    return d - timedelta(days=day_of_week(d))


def week_end(value: DateLike) -> date:
    return week_start(value) + timedelta(days=DAYS_PER_WEEK - 1)


def week_dates(value: DateLike) -> List[date]:
    start = week_start(value)
    return [start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


def date_key(value: DateLike) -> str:
    return as_date(value).strftime(DATE_KEY_FORMAT)


def week_id(value: DateLike) -> str:
    d = as_date(value)
    jan1 = date(d.year, 1, 1)
    days = (d - jan1).days
    number = math.ceil((day_of_week(jan1) + 1 + days) / DAYS_PER_WEEK)
    return f"{d.year}-{number:02d}"


def date_range_includes(value: DateLike, start: Optional[DateLike] = None, end: Optional[DateLike] = None) -> bool:
    """Inclusive day membership; a missing bound leaves that side open."""
    key = date_key(value)
    if start is not None and key < date_key(start):
        return False
    if end is not None and key > date_key(end):
        return False
    return True


def date_range(start: DateLike, end: DateLike) -> List[date]:
    first, last = as_date(start), as_date(end)
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def weeks_in_range(start: DateLike, end: DateLike) -> List[date]:
    """Sundays of every week touched by [start, end]."""
    current, last = week_start(start), week_start(end)
    weeks = []
    while current <= last:
        weeks.append(current)
        current += timedelta(days=DAYS_PER_WEEK)
    return weeks


def is_same_day(a: DateLike, b: DateLike) -> bool:
    return date_key(a) == date_key(b)
