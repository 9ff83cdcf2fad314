"""Period labels shared by bucketing, the trend estimator and the prompt builder.

Labels are ``YYYY-MM-DD`` for day and week buckets (a week is labelled by
its Sunday) and ``YYYY-MM`` for month buckets.
"""
from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

from salescast.core.errors import PeriodParseError

DAY_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

FORECAST_PERIODS = {"day": 14, "week": 4, "month": 6}
DEFAULT_FORECAST_PERIODS = 12


def get_forecast_periods(granularity: str) -> int:
    return FORECAST_PERIODS.get(granularity, DEFAULT_FORECAST_PERIODS)


def week_start(d: date) -> date:
    # weekday(): Monday=0 .. Sunday=6
    return d - timedelta(days=(d.weekday() + 1) % 7)


def bucket_key(d: date, granularity: str) -> str:
    if granularity == "day":
        return d.strftime(DAY_FORMAT)
    if granularity == "week":
        return week_start(d).strftime(DAY_FORMAT)
    if granularity == "month":
        return d.strftime(MONTH_FORMAT)
    raise ValueError(f"unknown granularity {granularity!r}")


def parse_label(label: str, granularity: str) -> date:
    fmt = MONTH_FORMAT if granularity == "month" else DAY_FORMAT
    try:
        return datetime.strptime(label, fmt).date()
    except (TypeError, ValueError) as exc:
        raise PeriodParseError(label, granularity) from exc


def parse_any_label(label: str) -> date | None:
    """Parse either label format; None when neither applies."""
    for fmt in (DAY_FORMAT, MONTH_FORMAT):
        try:
            return datetime.strptime(label, fmt).date()
        except (TypeError, ValueError):
            continue
    return None


def add_months(d: date, months: int) -> date:
    """Shift by calendar months, clamping the day to the target month's length."""
    years, month0 = divmod(d.month - 1 + months, 12)
    year = d.year + years
    day = min(d.day, calendar.monthrange(year, month0 + 1)[1])
    return date(year, month0 + 1, day)


def advance(last_label: str, granularity: str, offset: int) -> str:
    """Label of the bucket ``offset`` steps after ``last_label``.

    Raises PeriodParseError when ``last_label`` is not a valid label for
    ``granularity``.
    """
    if granularity not in FORECAST_PERIODS:
        raise ValueError(f"unknown granularity {granularity!r}")
    base = parse_label(last_label, granularity)
    if granularity == "day":
        return (base + timedelta(days=offset)).strftime(DAY_FORMAT)
    if granularity == "week":
        return (base + timedelta(days=offset * 7)).strftime(DAY_FORMAT)
    return add_months(base, offset).strftime(MONTH_FORMAT)
