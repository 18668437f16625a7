"""Datetime helpers.

Everything written to the database is timezone-aware UTC, matching the
model defaults. Values read back are passed through ``as_utc`` before
being compared, since the SQLite driver may hand them back without tzinfo.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Aware UTC version of ``value``. Naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def month_bounds(year: int, month: int) -> tuple[datetime, Optional[datetime]]:
    """[first instant of the month, first instant of the next month), in UTC.

    The upper bound is None for December of the last representable year.
    """
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month < 12:
        return start, datetime(year, month + 1, 1, tzinfo=timezone.utc)
    if year < 9999:
        return start, datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    return start, None
