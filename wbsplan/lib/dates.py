"""
Calendar date arithmetic for the planner.

All schedule dates are plain calendar days (``YYYY-MM-DD``). They are parsed
into ``datetime.date`` objects, never through a UTC timestamp, so a date can
not shift by a day depending on the host timezone or a DST change.

Malformed input does not raise by default: the current date is substituted
and a warning is logged. Pass ``strict=True`` to get ``InvalidDateInput``.
"""

import logging
import re
from datetime import date, timedelta

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r'^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$')


class InvalidDateInput(ValueError):
    """Raised when a date string can not be interpreted."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def normalize_date_str(value: str) -> str:
    """Normalize separators and padding: '2025/6/1' -> '2025-06-01'.

    Strings that don't look like a date are returned stripped but otherwise
    unchanged, so callers comparing them lexically still get stable results.
    """
    text = str(value).strip()
    match = DATE_PATTERN.match(text)
    if not match:
        return text.replace("/", "-")
    year, month, day = match.groups()
    return f"{year}-{int(month):02d}-{int(day):02d}"


def parse_local_date(value, strict: bool = False, today: date | None = None) -> date:
    """Interpret a ``YYYY-MM-DD`` string as a local calendar date.

    Args:
        value: Date string (``-`` or ``/`` separators) or a ``date``.
        strict: Raise ``InvalidDateInput`` instead of substituting.
        today: Substitute used for invalid input (defaults to ``date.today()``).
    """
    if isinstance(value, date):
        return value

    match = DATE_PATTERN.match(str(value).strip()) if value is not None else None
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            pass

    if strict:
        raise InvalidDateInput(value)

    substitute = today or date.today()
    logger.warning(f"[DATES] Invalid date {value!r}, substituting {substitute.isoformat()}")
    return substitute


def format_date(d: date) -> str:
    """Serialize a date as ``YYYY-MM-DD``."""
    return d.isoformat()


def today_str(today: date | None = None) -> str:
    return format_date(today or date.today())


def add_days(value, n: int) -> str:
    """Return the date ``n`` calendar days after ``value`` as a string."""
    return format_date(parse_local_date(value) + timedelta(days=n))


def day_diff(start, end) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if end is earlier)."""
    return parse_local_date(end).toordinal() - parse_local_date(start).toordinal()


def iso_week(value) -> int:
    """ISO-8601 week number: week 1 is the week holding the year's first Thursday."""
    d = parse_local_date(value)
    thursday = d + timedelta(days=3 - d.weekday())
    first_thursday = date(thursday.year, 1, 4)
    first_thursday += timedelta(days=3 - first_thursday.weekday())
    return 1 + (thursday - first_thursday).days // 7


def week_start(value) -> date:
    """Monday of the week containing ``value`` (Sunday belongs to the week before)."""
    d = parse_local_date(value)
    return d - timedelta(days=d.weekday())


def is_weekend(value) -> bool:
    return parse_local_date(value).weekday() >= 5
