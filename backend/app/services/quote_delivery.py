from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional

from .business_days import add_business_days, calculate_delivery_estimate, to_date
from .stores import HolidayReader, SettingsReader, read_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryEstimate:
    estimated_delivery_date: date
    business_days_required: int
    skipped_holidays: int = 0


def _as_date(value: Any) -> date:
    if isinstance(value, (date, datetime)):
        return to_date(value)
    return date.fromisoformat(str(value)[:10])


def calculate_delivery_with_holidays(
    holidays: HolidayReader,
    location_id: Optional[str],
    business_days: int,
    start: Optional[date | datetime] = None,
) -> DeliveryEstimate:
    """Estimate delivery for ``location_id``, skipping its closure dates.

    A failed holiday lookup never blocks the estimate: the weekend-only
    calculation is returned instead and the failure is logged.
    """
    if start is None:
        start = datetime.now(timezone.utc)

    if not location_id:
        return DeliveryEstimate(
            estimated_delivery_date=calculate_delivery_estimate(business_days, start),
            business_days_required=business_days,
        )

    try:
        from_date = to_date(start)
        rows = holidays.list_holidays(location_id, from_date)
        holiday_dates = {_as_date(read_field(row, "holiday_date")) for row in rows or []}
        walk = add_business_days(from_date, business_days, holiday_dates)
    except Exception as exc:
        logger.warning(
            "Holiday lookup failed for location %s; using weekend-only estimate: %s",
            location_id,
            exc,
            exc_info=True,
        )
        return DeliveryEstimate(
            estimated_delivery_date=calculate_delivery_estimate(business_days, start),
            business_days_required=business_days,
        )

    if walk.skipped_holidays:
        logger.info(
            "Delivery estimate for location %s skipped %d holiday(s)",
            location_id,
            walk.skipped_holidays,
        )
    return DeliveryEstimate(
        estimated_delivery_date=walk.end_date,
        business_days_required=business_days,
        skipped_holidays=walk.skipped_holidays,
    )


def get_setting_value(reader: SettingsReader, key: str, default: Any = None) -> Any:
    """Read ``key`` from the settings store; blank values and errors yield ``default``."""
    try:
        value = reader.get(key)
    except Exception as exc:
        logger.warning("Error fetching setting %s: %s", key, exc, exc_info=True)
        return default
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return value
