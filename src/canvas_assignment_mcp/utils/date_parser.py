"""Date/time parsing helpers.

Provides tolerant parsing of Canvas due dates and caller-supplied day
bounds, deterministic display formatting, and inclusive day-range checks.

A bare calendar date (``YYYY-MM-DD``) means midnight in the *local*
calendar, not UTC, so that "due before 2024-06-01" covers the whole local
day of June 1st.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone, tzinfo
from typing import Optional

from ..errors import ParseError

NO_DUE_DATE = "No due date"
NO_DATE_SET = "No date set"

_CALENDAR_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def _replace_z_suffix(value: str) -> str:
    if value.endswith(("Z", "z")):
        return value[:-1] + "+00:00"
    return value


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a calendar date or ISO 8601 timestamp into an aware datetime.

    Timestamps without an offset are taken as local time. Returns None for
    empty, malformed or impossible values (e.g. ``2024-02-30``).

    Example:
        >>> parse_date("2024-06-15T23:59:00Z").isoformat()
        '2024-06-15T23:59:00+00:00'
        >>> parse_date("not a date") is None
        True
    """

    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    match = _CALENDAR_DATE.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return datetime(year, month, day).astimezone()
        except (ValueError, OverflowError, OSError):
            return None
    try:
        dt = datetime.fromisoformat(_replace_z_suffix(text))
        if dt.tzinfo is None:
            dt = dt.astimezone()
    except (ValueError, OverflowError, OSError):
        return None
    return dt


def require_date(value: Optional[str], *, field: str = "date") -> datetime:
    """Strict variant of `parse_date`.

    Raises:
        ParseError: If the value is missing or cannot be parsed.
    """

    dt = parse_date(value)
    if dt is None:
        raise ParseError(
            f"Invalid {field}: expected YYYY-MM-DD or an ISO 8601 timestamp",
            {"field": field},
        )
    return dt


def _local_day(dt: datetime, **time_fields: int) -> datetime:
    # Work on local wall-clock time so the offset is recomputed for the new time.
    naive = dt.astimezone().replace(tzinfo=None)
    return naive.replace(**time_fields).astimezone()


def start_of_day(dt: datetime) -> datetime:
    """00:00:00.000 local time on the calendar day of `dt`."""
    return _local_day(dt, hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    """23:59:59.999 local time on the calendar day of `dt`."""
    return _local_day(dt, hour=23, minute=59, second=59, microsecond=999000)


def to_utc_iso(dt: datetime) -> str:
    """Render an instant as a UTC ISO 8601 string with millisecond precision.

    Example:
        >>> to_utc_iso(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))
        '2024-06-01T12:00:00.000Z'
    """
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_for_display(
    value: Optional[str],
    *,
    fallback: str = NO_DUE_DATE,
    tz: Optional[tzinfo] = None,
) -> str:
    """Render a date string as ``M/D/YYYY, h:MM:SS AM``.

    Args:
        value: Date string from Canvas or a caller; may be None.
        fallback: Text returned when `value` is absent or unparsable.
        tz: Zone to display in; the machine's local zone when None.

    Returns:
        A display string. The same input always yields the same output.
    """

    dt = parse_date(value)
    if dt is None:
        return fallback
    dt = dt.astimezone(tz) if tz is not None else dt.astimezone()
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return (
        f"{dt.month}/{dt.day}/{dt.year}, "
        f"{hour}:{dt.minute:02d}:{dt.second:02d} {meridiem}"
    )


def is_within_range(
    due: Optional[str],
    before: Optional[str] = None,
    after: Optional[str] = None,
) -> bool:
    """Check whether a due date falls inside an inclusive day range.

    Assignments without a (parsable) due date always match. `before` covers
    its whole calendar day, `after` starts at the beginning of its day. A
    bound that cannot be parsed imposes no constraint.
    """

    due_dt = parse_date(due)
    if due_dt is None:
        return True
    if before:
        before_dt = parse_date(before)
        if before_dt is not None and due_dt > end_of_day(before_dt):
            return False
    if after:
        after_dt = parse_date(after)
        if after_dt is not None and due_dt < start_of_day(after_dt):
            return False
    return True
