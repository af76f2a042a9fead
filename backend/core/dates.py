"""Calendar-month arithmetic, pinned to UTC."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Union

from dateutil.relativedelta import relativedelta


def to_utc_date(value: Union[date, datetime]) -> date:
    """Return the UTC calendar date for a date or datetime.

    Naive datetimes are taken to already be in UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def add_months(start: Union[date, datetime], months: int) -> date:
    """Move ``start`` forward by whole calendar months.

    Day-of-month is clamped to the end of shorter months, so Jan 31 plus one
    month is Feb 28 (or Feb 29 in a leap year).
    """
    if months < 0:
        raise ValueError("months must be non-negative")
    return to_utc_date(start) + relativedelta(months=months)
