from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Iterable, Optional

from ..core.config import settings
from ..models.adjustment import AdjustmentType, DiscountType
from ..models.base import utcnow
from .stores import AdjustmentStore, LineItemStore, QuoteResultsStore, read_field

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")


@dataclass
class QuoteTotalsSnapshot:
    translation: Decimal
    certification: Decimal
    additional_items: Decimal
    discounts_or_surcharges: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    tax_rate: Decimal
    currency: str

    def as_payload(self) -> dict[str, float]:
        return {
            "translation": float(self.translation),
            "certification": float(self.certification),
            "additional_items": float(self.additional_items),
            "discounts_or_surcharges": float(self.discounts_or_surcharges),
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "total": float(self.total),
        }


def round2(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value if value.is_finite() else default
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default
    return result if result.is_finite() else default


def effective_rate(item: Any) -> Decimal:
    override = read_field(item, "unit_rate_override")
    if override is not None:
        return to_decimal(override)
    return to_decimal(read_field(item, "unit_rate"))


def translation_amount(item: Any) -> Decimal:
    return to_decimal(read_field(item, "billable_pages")) * effective_rate(item)


def compute_line_total(item: Any) -> Decimal:
    """pages x (override or rate) + certification amount."""
    certification = to_decimal(read_field(item, "certification_amount"))
    return round2(translation_amount(item) + certification)


def compute_quote_totals_snapshot(
    line_items: Iterable[Any],
    adjustments: Iterable[Any] = (),
    tax_rate: Optional[Decimal] = None,
    currency: Optional[str] = None,
) -> QuoteTotalsSnapshot:
    """Return canonical totals for a quote's lines and adjustments.

    Percentage discounts and surcharges apply to the line-item base
    (translation + certification), never to additional items.
    """
    tax_rate = settings.QUOTE_TAX_RATE if tax_rate is None else to_decimal(tax_rate)

    translation = Decimal("0")
    certification = Decimal("0")
    for item in line_items:
        translation += translation_amount(item)
        certification += to_decimal(read_field(item, "certification_amount"))
    base = translation + certification

    additional = Decimal("0")
    adjustment_total = Decimal("0")
    for adj in adjustments:
        kind = str(read_field(adj, "type") or "").lower()
        discount_type = str(read_field(adj, "discount_type") or "").lower()
        value = to_decimal(read_field(adj, "discount_value"))
        if kind == AdjustmentType.ADDITIONAL_ITEM.value:
            additional += to_decimal(read_field(adj, "total_amount"))
            continue
        if kind not in (AdjustmentType.DISCOUNT.value, AdjustmentType.SURCHARGE.value):
            logger.warning("Ignoring adjustment with unknown type %r", kind)
            continue
        if discount_type == DiscountType.FIXED.value:
            amount = abs(value)
        elif discount_type == DiscountType.PERCENTAGE.value:
            amount = base * value / _HUNDRED
        else:
            continue
        adjustment_total += -amount if kind == AdjustmentType.DISCOUNT.value else amount

    subtotal = round2(base + additional + adjustment_total)
    tax = round2(subtotal * tax_rate)
    total = round2(subtotal + tax)

    return QuoteTotalsSnapshot(
        translation=round2(translation),
        certification=round2(certification),
        additional_items=round2(additional),
        discounts_or_surcharges=round2(adjustment_total),
        subtotal=subtotal,
        tax=tax,
        total=total,
        tax_rate=tax_rate,
        currency=(currency or settings.DEFAULT_CURRENCY or "CAD").upper(),
    )


def recalc_and_upsert_quote_results(
    quote_id: str,
    line_items: LineItemStore,
    adjustments: AdjustmentStore,
    results_store: QuoteResultsStore,
) -> QuoteTotalsSnapshot:
    """Recompute the unified totals for ``quote_id`` and upsert its results row."""
    snapshot = compute_quote_totals_snapshot(
        line_items.list_for_quote(quote_id),
        adjustments.list_for_quote(quote_id),
    )
    pricing = snapshot.as_payload()
    pricing["tax_rate"] = float(snapshot.tax_rate)
    results_store.upsert(
        quote_id,
        {
            "subtotal": snapshot.subtotal,
            "tax": snapshot.tax,
            "total": snapshot.total,
            "shipping_total": Decimal("0"),
            "currency": snapshot.currency,
            "results_json": {"pricing": pricing},
            "computed_at": utcnow(),
        },
    )
    logger.info(
        "Recalculated quote %s subtotal=%s tax=%s total=%s",
        quote_id,
        snapshot.subtotal,
        snapshot.tax,
        snapshot.total,
    )
    return snapshot
