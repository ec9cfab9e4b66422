"""Date utilities for juntos.

Pure functions for date range calculations and formatting.
"""

from datetime import datetime, timedelta

from juntos.domain.models import Period


def _start_of_month(dt: datetime) -> datetime:
    return dt.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _next_month(dt: datetime) -> datetime:
    return (dt.replace(day=28) + timedelta(days=4)).replace(day=1)


def period_range(period: Period, now: datetime) -> tuple[datetime | None, datetime | None, str]:
    """Calculate the half-open [since, until) range for a named period.

    Weeks are ISO weeks (Monday to Sunday).

    Args:
        period: One of "this-week", "this-month", "last-month", "this-year", "all".
        now: Reference time (the only impure input, so it is passed in).

    Returns:
        Tuple of (since, until, label). since and until are None for "all".

    Raises:
        ValueError: If the period is unknown.
    """
    if period == "all":
        return None, None, "All Time"

    if period == "this-week":
        since = (now - timedelta(days=now.weekday())).replace(hour=0, minute=0, second=0, microsecond=0)
        return since, since + timedelta(days=7), f"Week of {since.strftime('%d %B %Y')}"

    if period == "this-month":
        since = _start_of_month(now)
        return since, _next_month(since), since.strftime("%B %Y")

    if period == "last-month":
        until = _start_of_month(now)
        since = _start_of_month(until - timedelta(days=1))
        return since, until, since.strftime("%B %Y")

    if period == "this-year":
        since = _start_of_month(now).replace(month=1)
        return since, since.replace(year=since.year + 1), str(since.year)

    raise ValueError(f"Unknown period '{period}'")
