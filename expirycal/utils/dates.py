"""Date utilities."""

import calendar
import functools
from datetime import date, datetime, timedelta, timezone


def today_utc() -> date:
    """Return the current calendar date in UTC.

    Returns:
        date: Today's date in the canonical timezone.
    """
    return datetime.now(timezone.utc).date()


@functools.lru_cache(maxsize=4096)
def parse_expiry_date(raw: str) -> date:
    """Parse raw expiry text into a calendar date in UTC.

    Plain ``YYYY-MM-DD`` values are taken as-is. Datetime values are
    converted to UTC before the date is taken; naive datetimes are
    treated as UTC.

    Args:
        raw (str): The expiry date text.

    Raises:
        ValueError: If the text is not a valid ISO date or datetime, or
            its UTC date falls outside the supported range.

    Returns:
        date: The expiry date.
    """
    text: str = raw.strip()
    if not text:
        raise ValueError("empty expiry date")
    if len(text) == 10:
        return date.fromisoformat(text)

    moment: datetime = datetime.fromisoformat(text)
    if moment.tzinfo is not None:
        try:
            moment = moment.astimezone(timezone.utc)
        except OverflowError as exc:
            raise ValueError(f"expiry date out of range: {text}") from exc
    return moment.date()


def to_date_key(value: date) -> str:
    """Format a date as a ``YYYY-MM-DD`` bucket key."""
    return value.isoformat()


def days_between(expiry: date, reference: date) -> int:
    """Whole calendar days from ``reference`` to ``expiry``.

    Args:
        expiry (date): The expiry date.
        reference (date): The reference date.

    Returns:
        int: Negative when the expiry lies before the reference date.
    """
    return (expiry - reference).days


def month_bounds(
    year: int, month: int, buffer_days: int = 0
) -> tuple[date, date]:
    """First and last day of a month, padded on both sides.

    Args:
        year (int): The year.
        month (int): The month, 1 to 12.
        buffer_days (int): Days added before the start and after the end.

    Returns:
        tuple[date, date]: Inclusive start and end dates.
    """
    last_day: int = calendar.monthrange(year, month)[1]
    start: date = date(year, month, 1) - timedelta(days=buffer_days)
    end: date = date(year, month, last_day) + timedelta(days=buffer_days)
    return start, end
