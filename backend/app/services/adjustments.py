from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..models.adjustment import AdjustmentType, DiscountType
from ..utils.errors import AdjustmentNotFoundError, AdjustmentValidationError
from .activity_log import log_activity_safely
from .line_items import as_number
from .quote_state import ensure_editable, stamp_edit
from .quote_totals import QuoteTotalsSnapshot, recalc_and_upsert_quote_results, round2
from .stores import QuoteStores, read_field

logger = logging.getLogger(__name__)


@dataclass
class AdjustmentMutation:
    adjustment: Any
    totals: QuoteTotalsSnapshot


def build_adjustment_row(fields: Mapping[str, Any]) -> dict[str, Any]:
    kind = str(fields.get("type") or "").lower()
    row: dict[str, Any] = {
        "type": kind,
        "description": fields.get("description") or "",
        "is_taxable": bool(fields["is_taxable"]) if fields.get("is_taxable") is not None else True,
    }
    if kind == AdjustmentType.ADDITIONAL_ITEM.value:
        quantity = as_number(fields.get("quantity"))
        unit_amount = as_number(fields.get("unit_amount"))
        quantity = Decimal("1") if quantity is None else quantity
        unit_amount = Decimal("0") if unit_amount is None else unit_amount
        row.update(
            quantity=quantity,
            unit_amount=unit_amount,
            total_amount=round2(quantity * unit_amount),
        )
        return row
    if kind in (AdjustmentType.DISCOUNT.value, AdjustmentType.SURCHARGE.value):
        discount_type = str(fields.get("discount_type") or "").lower()
        if discount_type not in {d.value for d in DiscountType}:
            raise AdjustmentValidationError("Invalid discount_type", "discount_type")
        value = as_number(fields.get("discount_value"))
        row.update(
            discount_type=discount_type,
            discount_value=Decimal("0") if value is None else value,
            total_amount=Decimal("0"),
        )
        return row
    raise AdjustmentValidationError("Invalid type", "type")


def create_adjustment(
    stores: QuoteStores,
    quote_id: str,
    fields: Mapping[str, Any],
    actor_id: Optional[str] = None,
) -> AdjustmentMutation:
    ensure_editable(stores.quotes, quote_id)

    adjustment = stores.adjustments.insert(quote_id, build_adjustment_row(fields))
    stamp_edit(stores.quotes, quote_id, actor_id)

    totals = recalc_and_upsert_quote_results(
        quote_id, stores.line_items, stores.adjustments, stores.results
    )
    log_activity_safely(
        stores.activity,
        "quote_adjustment_added",
        actor_id,
        quote_id,
        {"adjustment_id": read_field(adjustment, "id"), "type": read_field(adjustment, "type")},
    )
    return AdjustmentMutation(adjustment=adjustment, totals=totals)


def delete_adjustment(
    stores: QuoteStores,
    quote_id: str,
    adjustment_id: str,
    actor_id: Optional[str] = None,
) -> QuoteTotalsSnapshot:
    ensure_editable(stores.quotes, quote_id)

    if not stores.adjustments.delete(quote_id, adjustment_id):
        raise AdjustmentNotFoundError(adjustment_id)
    stamp_edit(stores.quotes, quote_id, actor_id)

    totals = recalc_and_upsert_quote_results(
        quote_id, stores.line_items, stores.adjustments, stores.results
    )
    log_activity_safely(
        stores.activity,
        "quote_adjustment_deleted",
        actor_id,
        quote_id,
        {"adjustment_id": adjustment_id},
    )
    return totals
