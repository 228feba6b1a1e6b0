"""Business-day arithmetic used for delivery and expiry estimates.

Everything here is pure: no I/O and no dependence on the machine timezone.
Walks operate on ``date`` values, so a timestamp reference is reduced to its
calendar date before counting.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import AbstractSet, Optional

DEFAULT_BUSINESS_DAYS = 5

# First digit run, optionally followed by "-<digits>" ("3-5 business days").
_TURNAROUND_RE = re.compile(r"(\d+)-?(\d+)?")

# date.weekday(): Monday == 0 ... Friday == 4
_LAST_WEEKDAY = 4


@dataclass(frozen=True)
class BusinessDayWalk:
    end_date: date
    skipped_holidays: int


def is_business_day(day: date, holidays: AbstractSet[date] = frozenset()) -> bool:
    return day.weekday() <= _LAST_WEEKDAY and day not in holidays


def to_date(value: date | datetime) -> date:
    """Reduce a timestamp to its UTC calendar date; dates pass through."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def add_business_days(
    start: date | datetime,
    business_days: int,
    holidays: Optional[AbstractSet[date]] = None,
) -> BusinessDayWalk:
    """Walk forward from ``start`` until ``business_days`` working days passed.

    Weekends never count. A weekday found in ``holidays`` does not count either
    and is tallied in ``skipped_holidays``. ``business_days == 0`` returns the
    start date unchanged.
    """
    holidays = holidays or frozenset()
    current = to_date(start)
    added = 0
    skipped = 0
    while added < business_days:
        current += timedelta(days=1)
        if current.weekday() > _LAST_WEEKDAY:
            continue
        if current in holidays:
            skipped += 1
            continue
        added += 1
    return BusinessDayWalk(end_date=current, skipped_holidays=skipped)


def calculate_delivery_estimate(
    business_days: int, start: Optional[date | datetime] = None
) -> date:
    """Delivery date ignoring holidays (weekends only)."""
    if start is None:
        start = datetime.now(timezone.utc)
    return add_business_days(start, business_days).end_date


def parse_business_days(turnaround: Optional[str]) -> int:
    """Return the upper bound of a turnaround description.

    >>> parse_business_days("3-5 business days")
    5
    >>> parse_business_days("3 business days")
    3
    >>> parse_business_days("")
    5
    """
    if not turnaround:
        return DEFAULT_BUSINESS_DAYS
    match = _TURNAROUND_RE.search(str(turnaround))
    if not match:
        return DEFAULT_BUSINESS_DAYS
    days = int(match.group(2) or match.group(1))
    # "0 days" would put delivery on the reference date itself
    return days if days > 0 else DEFAULT_BUSINESS_DAYS


def calculate_quote_expiry(
    expiry_days: int | str, start: Optional[datetime] = None
) -> datetime:
    """Add ``expiry_days`` calendar days to ``start`` keeping the time of day."""
    if start is None:
        start = datetime.now(timezone.utc)
    return start + timedelta(days=int(expiry_days))
