"""Working-day calendar arithmetic.

Saturday and Sunday are non-working days. There is no holiday support.
Functions accept either ``datetime.date`` values or ISO ``YYYY-MM-DD``
strings; functions that return dates to callers return ISO strings.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date, datetime, timedelta

from .exceptions import InvalidDateError
from .models import DayInfo

logger = logging.getLogger(__name__)

DateLike = date | str

_ONE_DAY = timedelta(days=1)
# date.weekday(): Monday == 0 ... Saturday == 5, Sunday == 6
_WEEKEND = (5, 6)
_DISPLAY_FORMAT = "%d/%m/%Y"


def parse_iso_date(value: DateLike) -> date:
    """Parse a date value into a ``datetime.date``.

    Args:
        value: A ``date``/``datetime`` or an ISO string. Full ISO datetimes
            (``2025-08-08T00:00:00``) are truncated to their date part.

    Returns:
        The parsed date.

    Raises:
        InvalidDateError: If the value is not a date or parsable string.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(value)

    text = value.strip()
    try:
        if "T" in text:
            return datetime.fromisoformat(text).date()
        return date.fromisoformat(text)
    except ValueError as exc:
        raise InvalidDateError(value) from exc


def format_iso_date(value: DateLike) -> str:
    """Normalize a date value to ``YYYY-MM-DD``."""
    return parse_iso_date(value).isoformat()


def is_weekend_day(value: DateLike) -> bool:
    """Return True when the day is a Saturday or Sunday."""
    return parse_iso_date(value).weekday() in _WEEKEND


def is_working_day(value: DateLike) -> bool:
    """Return True when the day is Monday through Friday."""
    return not is_weekend_day(value)


def roll_forward(value: DateLike) -> date:
    """Return the day itself if it is a working day, else the next one."""
    current = parse_iso_date(value)
    while current.weekday() in _WEEKEND:
        current += _ONE_DAY
    return current


def next_working_day(value: DateLike) -> date:
    """Return the first working day strictly after the given day."""
    return roll_forward(parse_iso_date(value) + _ONE_DAY)


def end_date(start: DateLike, working_days: int) -> date:
    """Compute the last day of a span of ``working_days`` working days.

    A non-working start is first rolled forward to the next working day.
    The start day counts as the first working day, so a duration of 1 on a
    working day ends on that same day.

    Raises:
        ValueError: If ``working_days`` is less than 1.
        InvalidDateError: If ``start`` cannot be parsed.
    """
    if working_days < 1:
        msg = f"working_days must be at least 1, got {working_days}"
        raise ValueError(msg)

    current = roll_forward(start)
    remaining = working_days - 1
    while remaining > 0:
        current += _ONE_DAY
        if current.weekday() not in _WEEKEND:
            remaining -= 1
    return current


def calculate_end_date(start: DateLike, working_days: int) -> str:
    """ISO-string form of :func:`end_date`.

    ``calculate_end_date("2025-08-08", 5)`` spans the weekend
    (Fri, Mon, Tue, Wed, Thu) and returns ``"2025-08-14"``.
    """
    return end_date(start, working_days).isoformat()


def iter_days(start: DateLike, end: DateLike) -> Iterator[DayInfo]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    current = parse_iso_date(start)
    last = parse_iso_date(end)
    while current <= last:
        yield DayInfo(date=current.isoformat(), is_weekend=current.weekday() in _WEEKEND)
        current += _ONE_DAY


def get_days_in_range(start: DateLike, end: DateLike) -> list[DayInfo]:
    """List every day in the inclusive range, tagged as weekend or not.

    Returns an empty list when ``end`` is before ``start``.
    """
    return list(iter_days(start, end))


def get_working_days_between(start: DateLike, end: DateLike) -> int:
    """Count the working days in the inclusive range ``start``..``end``."""
    return sum(1 for day in iter_days(start, end) if not day.is_weekend)


def format_display_date(value: DateLike) -> str:
    """Format a date as ``dd/mm/yyyy`` for display.

    Unparsable input is returned unchanged so a timeline can still show
    whatever the user typed.
    """
    try:
        return parse_iso_date(value).strftime(_DISPLAY_FORMAT)
    except InvalidDateError:
        logger.debug("Cannot format %r for display", value)
        return str(value)


def day_offset(value: DateLike, timeline_start: DateLike) -> int:
    """Calendar days between ``timeline_start`` and ``value``, floored at 0.

    Used to position a task bar on a timeline that begins at
    ``timeline_start``.
    """
    delta = parse_iso_date(value) - parse_iso_date(timeline_start)
    return max(0, delta.days)
