from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Optional

from ..core.config import settings
from .business_days import calculate_quote_expiry, parse_business_days
from .quote_delivery import calculate_delivery_with_holidays, get_setting_value
from .stores import HolidayReader, QuoteResultsStore, SettingsReader, read_field

logger = logging.getLogger(__name__)

TURNAROUND_SETTING = "default_turnaround_time"
EXPIRY_SETTING = "quote_expiry_days"


@dataclass
class DeliveryInfo:
    estimated_delivery_date: date
    turnaround_time: str
    expiry_date: datetime
    expiry_days: int
    skipped_holidays: int


@dataclass
class EnrichmentResult:
    success: bool
    updated: Any = None
    delivery_info: Optional[DeliveryInfo] = None
    error: Optional[str] = None
    payload: dict[str, Any] = field(default_factory=dict)


def _reference_instant(results: Any) -> datetime:
    computed_at = read_field(results, "computed_at")
    if isinstance(computed_at, datetime):
        return computed_at
    if isinstance(computed_at, str) and computed_at:
        return datetime.fromisoformat(computed_at.replace("Z", "+00:00"))
    return datetime.now(timezone.utc)


def enrich_quote_with_delivery_info(
    results_store: QuoteResultsStore,
    settings_reader: SettingsReader,
    holidays: HolidayReader,
    quote_id: str,
    location_id: Optional[str] = None,
) -> Optional[EnrichmentResult]:
    """Compute and persist delivery/expiry fields on the quote's results row.

    Returns ``None`` when the quote has no pricing results yet. Every other
    failure is reported as ``EnrichmentResult(success=False, error=...)`` so
    batch callers can branch without exception handling.
    """
    try:
        results = results_store.get(quote_id)
        if not results:
            logger.info("Quote %s has no pricing results; skipping enrichment", quote_id)
            return None

        turnaround = str(
            get_setting_value(settings_reader, TURNAROUND_SETTING, settings.DEFAULT_TURNAROUND_TIME)
        )
        expiry_days = int(
            get_setting_value(settings_reader, EXPIRY_SETTING, settings.DEFAULT_QUOTE_EXPIRY_DAYS)
        )
        business_days = parse_business_days(turnaround)

        reference = _reference_instant(results)
        delivery = calculate_delivery_with_holidays(holidays, location_id, business_days, reference)
        expiry_date = calculate_quote_expiry(expiry_days, reference)

        payload = {
            "estimated_delivery_date": delivery.estimated_delivery_date,
            "delivery_estimate_text": turnaround,
            "quote_expires_at": expiry_date,
            "location_id": location_id,
        }
        updated = results_store.update(quote_id, payload)
    except Exception as exc:
        logger.error("Error enriching quote %s with delivery info: %s", quote_id, exc, exc_info=True)
        return EnrichmentResult(success=False, error=str(exc))

    logger.info(
        "Quote %s delivery=%s expires=%s (%d business days, %d holiday(s) skipped)",
        quote_id,
        delivery.estimated_delivery_date.isoformat(),
        expiry_date.isoformat(),
        business_days,
        delivery.skipped_holidays,
    )
    return EnrichmentResult(
        success=True,
        updated=updated,
        delivery_info=DeliveryInfo(
            estimated_delivery_date=delivery.estimated_delivery_date,
            turnaround_time=turnaround,
            expiry_date=expiry_date,
            expiry_days=expiry_days,
            skipped_holidays=delivery.skipped_holidays,
        ),
        payload=payload,
    )
