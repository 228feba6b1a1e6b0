from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from ..models.line_item import LineItemSource
from ..utils.errors import LineItemNotFoundError, LineItemValidationError
from .activity_log import log_activity_safely
from .quote_state import ensure_editable, stamp_edit
from .quote_totals import QuoteTotalsSnapshot, compute_line_total, recalc_and_upsert_quote_results, round2
from .stores import QuoteStores, read_field

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = (
    "billable_pages",
    "unit_rate",
    "unit_rate_override",
    "certification_amount",
)
TEXT_FIELDS = (
    "override_reason",
    "certification_type_name",
    "source_language",
    "target_language",
)


@dataclass
class LineItemMutation:
    line_item: Any
    totals: QuoteTotalsSnapshot


def as_number(value: Any) -> Optional[Decimal]:
    """Coerce admin input to a finite Decimal; anything else becomes ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    return result if result.is_finite() else None


def as_column_number(value: Any) -> Optional[Decimal]:
    """``as_number`` rounded to the two-decimal scale of the line item columns."""
    number = as_number(value)
    return None if number is None else round2(number)


def build_line_item_patch(updates: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only the editable keys present in ``updates``."""
    patch: dict[str, Any] = {}
    for key in NUMERIC_FIELDS:
        if key in updates:
            patch[key] = as_column_number(updates[key])
    for key in TEXT_FIELDS:
        if key in updates:
            patch[key] = updates[key] or None
    return patch


def _pricing_view(item: Any, patch: Mapping[str, Any]) -> dict[str, Any]:
    view = {key: read_field(item, key) for key in NUMERIC_FIELDS}
    view.update({k: v for k, v in patch.items() if k in NUMERIC_FIELDS})
    return view


def update_line_item(
    stores: QuoteStores,
    quote_id: str,
    line_item_id: Optional[str],
    updates: Optional[Mapping[str, Any]],
    actor_id: Optional[str] = None,
) -> LineItemMutation:
    ensure_editable(stores.quotes, quote_id)

    if not line_item_id:
        raise LineItemValidationError("line_item_id")
    if updates is None:
        raise LineItemValidationError("updates")

    item = stores.line_items.get(quote_id, line_item_id)
    if item is None:
        raise LineItemNotFoundError(line_item_id)

    patch = build_line_item_patch(updates)
    patch["line_total"] = compute_line_total(_pricing_view(item, patch))
    stores.line_items.update(quote_id, line_item_id, patch)
    stamp_edit(stores.quotes, quote_id, actor_id)

    totals = recalc_and_upsert_quote_results(
        quote_id, stores.line_items, stores.adjustments, stores.results
    )
    log_activity_safely(
        stores.activity,
        "quote_line_item_updated",
        actor_id,
        quote_id,
        {"line_item_id": line_item_id, "updates": patch},
    )
    return LineItemMutation(
        line_item=stores.line_items.get(quote_id, line_item_id),
        totals=totals,
    )


def create_manual_line_item(
    stores: QuoteStores,
    quote_id: str,
    fields: Mapping[str, Any],
    actor_id: Optional[str] = None,
) -> LineItemMutation:
    ensure_editable(stores.quotes, quote_id)

    pages = as_column_number(fields.get("billable_pages"))
    if pages is None or pages <= 0:
        raise LineItemValidationError("billable_pages")
    rate = as_column_number(fields.get("unit_rate"))
    if rate is None or rate <= 0:
        raise LineItemValidationError("unit_rate")

    filename = fields.get("filename") or None
    row = stores.line_items.insert(
        quote_id,
        {
            "file_id": fields.get("file_id") or None,
            "filename": filename,
            "doc_type": fields.get("doc_type") or filename or "Document",
            "billable_pages": pages,
            "unit_rate": rate,
            "unit_rate_override": None,
            "override_reason": None,
            "certification_type_name": None,
            "certification_amount": Decimal("0"),
            "source_language": fields.get("source_language") or None,
            "target_language": fields.get("target_language") or None,
            "line_total": round2(pages * rate),
            "source": LineItemSource.MANUAL,
        },
    )
    stamp_edit(stores.quotes, quote_id, actor_id)

    totals = recalc_and_upsert_quote_results(
        quote_id, stores.line_items, stores.adjustments, stores.results
    )
    log_activity_safely(
        stores.activity,
        "quote_line_item_created",
        actor_id,
        quote_id,
        {"line_item_id": read_field(row, "id"), "source": LineItemSource.MANUAL},
    )
    return LineItemMutation(line_item=row, totals=totals)


def delete_line_item(
    stores: QuoteStores,
    quote_id: str,
    line_item_id: str,
    actor_id: Optional[str] = None,
) -> QuoteTotalsSnapshot:
    ensure_editable(stores.quotes, quote_id)

    if not stores.line_items.delete(quote_id, line_item_id):
        raise LineItemNotFoundError(line_item_id)
    stamp_edit(stores.quotes, quote_id, actor_id)

    totals = recalc_and_upsert_quote_results(
        quote_id, stores.line_items, stores.adjustments, stores.results
    )
    log_activity_safely(
        stores.activity,
        "quote_line_item_deleted",
        actor_id,
        quote_id,
        {"line_item_id": line_item_id},
    )
    return totals
