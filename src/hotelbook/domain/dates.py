"""Date parts validation for reservation filters and check-in.

Dates arrive as separate day/month/year parts. Overflowing parts are
normalized with calendar arithmetic (day 31 of February rolls into March,
month 13 into January of the next year) instead of being rejected here;
callers that need strict bounds check the parts before building dates.
"""

from __future__ import annotations

from datetime import date, timedelta

from hotelbook.domain.errors import IncompleteDateError, InvalidRangeError

DateParts = tuple[int | None, int | None, int | None]


def calendar_date(year: int, month: int, day: int) -> date:
    """Build a date from possibly overflowing parts.

    >>> calendar_date(2026, 2, 31)
    datetime.date(2026, 3, 3)
    """
    y, m = divmod(year * 12 + (month - 1), 12)
    return date(y, m + 1, 1) + timedelta(days=day - 1)


def _is_present(parts: DateParts) -> bool:
    return any(p is not None for p in parts)


def _bound(parts: DateParts) -> date | None:
    if not _is_present(parts):
        return None
    if any(p is None for p in parts):
        raise IncompleteDateError()
    day, month, year = parts
    try:
        return calendar_date(year, month, day)
    except (ValueError, OverflowError):
        raise InvalidRangeError("Invalid date range") from None


def resolve_date_window(
    start: DateParts,
    end: DateParts,
) -> tuple[date | None, date | None]:
    """Turn optional (day, month, year) bounds into dates.

    Args:
        start: (day, month, year) for the start bound, parts may be None.
        end: (day, month, year) for the end bound, parts may be None.

    Returns:
        (start_date, end_date); either is None when that bound was omitted.

    Raises:
        IncompleteDateError: A bound has some but not all parts.
        InvalidRangeError: Both bounds given and start is after end, or a
            bound falls outside the representable calendar.
    """
    start_date = _bound(start)
    end_date = _bound(end)

    if start_date is not None and end_date is not None and start_date > end_date:
        raise InvalidRangeError()

    return start_date, end_date


def stay_length(start: date, end: date) -> int:
    """Whole nights between start and end (end exclusive)."""
    return (end - start).days
