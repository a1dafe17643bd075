"""Calendar helpers shared by the models and the dashboard trends."""

from datetime import datetime, timezone
from typing import cast
from dateutil.relativedelta import relativedelta


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime; default for every `created_at` column."""
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Attach UTC to a naive datetime, or convert an aware one to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def start_of_month(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, 1, tzinfo=timezone.utc)


def month_window(now: datetime, months: int) -> list[tuple[int, int]]:
    """
    Build the contiguous `(year, month)` pairs of a trailing window.

    Parameters:
        now: Reference instant; its UTC month is the last entry of the window.
        months: Window length, at least 1.

    Returns:
        list[tuple[int, int]]: Exactly `months` pairs in ascending order, ending at the month of `now`.
    """
    current: datetime = cast(
        datetime, start_of_month(as_utc(now)) - relativedelta(months=months - 1)
    )
    window = []
    for _ in range(months):
        window.append((current.year, current.month))
        current = cast(datetime, current + relativedelta(months=1))
    return window
