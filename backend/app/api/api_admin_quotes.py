from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from .. import schemas
from ..crud import SqlHolidayReader, SqlSettingsReader
from ..models.base import utcnow
from ..services import adjustments as adjustment_service
from ..services import line_items as line_item_service
from ..services.quote_enrichment import enrich_quote_with_delivery_info
from ..services.quote_state import apply_transition, ensure_editable
from ..services.quote_totals import QuoteTotalsSnapshot
from ..services.stores import QuoteStores
from ..utils import error_response, quote_error_response
from ..utils.errors import QuoteError
from .dependencies import (
    get_current_admin_id,
    get_holiday_reader,
    get_quote_stores,
    get_settings_reader,
)

router = APIRouter(tags=["admin-quotes"])
logger = logging.getLogger(__name__)


def _totals(snapshot: QuoteTotalsSnapshot) -> schemas.QuoteTotalsRead:
    return schemas.QuoteTotalsRead(**snapshot.as_payload())


def _unexpected(action: str, quote_id: str, exc: Exception) -> HTTPException:
    logger.error("Failed to %s for quote %s: %s", action, quote_id, exc, exc_info=True)
    return error_response(
        f"Unable to {action}",
        {"quote": f"{action.replace(' ', '_')}_failed"},
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@router.post(
    "/admin/quotes/calculate-delivery",
    response_model=schemas.CalculateDeliveryResponse,
)
def calculate_delivery(
    payload: schemas.CalculateDeliveryRequest,
    stores: QuoteStores = Depends(get_quote_stores),
    settings_reader: SqlSettingsReader = Depends(get_settings_reader),
    holidays: SqlHolidayReader = Depends(get_holiday_reader),
):
    """Compute and store the delivery date and expiry for a quote."""
    try:
        ensure_editable(stores.quotes, payload.quote_id)
    except QuoteError as exc:
        raise quote_error_response(exc)

    result = enrich_quote_with_delivery_info(
        stores.results,
        settings_reader,
        holidays,
        payload.quote_id,
        payload.location_id,
    )
    if result is None:
        raise error_response(
            "Quote pricing has not been computed yet",
            {"quote_results": "missing"},
            status.HTTP_409_CONFLICT,
        )
    if not result.success:
        raise error_response(
            result.error or "Failed to calculate delivery info",
            {"delivery": "calculate_failed"},
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return schemas.CalculateDeliveryResponse(
        quote=schemas.QuoteResultsRead.model_validate(result.updated),
        delivery_info=schemas.DeliveryInfoRead.model_validate(result.delivery_info),
    )


@router.put(
    "/admin/quotes/{quote_id}/line-items",
    response_model=schemas.LineItemMutationResponse,
)
def update_line_item(
    quote_id: str,
    payload: schemas.LineItemUpdateRequest,
    stores: QuoteStores = Depends(get_quote_stores),
    admin_id: Optional[str] = Depends(get_current_admin_id),
):
    try:
        mutation = line_item_service.update_line_item(
            stores,
            quote_id,
            payload.line_item_id,
            payload.updates.model_dump(exclude_unset=True) if payload.updates is not None else None,
            admin_id,
        )
    except QuoteError as exc:
        raise quote_error_response(exc)
    except Exception as exc:  # pragma: no cover - persistence failure path
        raise _unexpected("update line item", quote_id, exc)
    return schemas.LineItemMutationResponse(
        line_item=(
            schemas.LineItemRead.model_validate(mutation.line_item)
            if mutation.line_item is not None
            else None
        ),
        totals=_totals(mutation.totals),
    )


@router.post(
    "/admin/quotes/{quote_id}/line-items/manual",
    response_model=schemas.LineItemMutationResponse,
)
def create_manual_line_item(
    quote_id: str,
    payload: schemas.ManualLineItemCreate,
    stores: QuoteStores = Depends(get_quote_stores),
    admin_id: Optional[str] = Depends(get_current_admin_id),
):
    try:
        mutation = line_item_service.create_manual_line_item(
            stores, quote_id, payload.model_dump(), admin_id
        )
    except QuoteError as exc:
        raise quote_error_response(exc)
    except Exception as exc:  # pragma: no cover - persistence failure path
        raise _unexpected("create line item", quote_id, exc)
    logger.info("Created manual line item %s on quote %s", mutation.line_item.id, quote_id)
    return schemas.LineItemMutationResponse(
        line_item=schemas.LineItemRead.model_validate(mutation.line_item),
        totals=_totals(mutation.totals),
    )


@router.delete(
    "/admin/quotes/{quote_id}/line-items/{line_item_id}",
    response_model=schemas.TotalsResponse,
)
def delete_line_item(
    quote_id: str,
    line_item_id: str,
    stores: QuoteStores = Depends(get_quote_stores),
    admin_id: Optional[str] = Depends(get_current_admin_id),
):
    try:
        totals = line_item_service.delete_line_item(stores, quote_id, line_item_id, admin_id)
    except QuoteError as exc:
        raise quote_error_response(exc)
    except Exception as exc:  # pragma: no cover - persistence failure path
        raise _unexpected("delete line item", quote_id, exc)
    return schemas.TotalsResponse(totals=_totals(totals))


@router.post(
    "/admin/quotes/{quote_id}/adjustments",
    response_model=schemas.AdjustmentMutationResponse,
)
def create_adjustment(
    quote_id: str,
    payload: schemas.AdjustmentCreate,
    stores: QuoteStores = Depends(get_quote_stores),
    admin_id: Optional[str] = Depends(get_current_admin_id),
):
    try:
        mutation = adjustment_service.create_adjustment(
            stores, quote_id, payload.model_dump(), admin_id
        )
    except QuoteError as exc:
        raise quote_error_response(exc)
    except Exception as exc:  # pragma: no cover - persistence failure path
        raise _unexpected("create adjustment", quote_id, exc)
    return schemas.AdjustmentMutationResponse(
        adjustment=schemas.AdjustmentRead.model_validate(mutation.adjustment),
        totals=_totals(mutation.totals),
    )


@router.delete(
    "/admin/quotes/{quote_id}/adjustments/{adjustment_id}",
    response_model=schemas.TotalsResponse,
)
def delete_adjustment(
    quote_id: str,
    adjustment_id: str,
    stores: QuoteStores = Depends(get_quote_stores),
    admin_id: Optional[str] = Depends(get_current_admin_id),
):
    try:
        totals = adjustment_service.delete_adjustment(stores, quote_id, adjustment_id, admin_id)
    except QuoteError as exc:
        raise quote_error_response(exc)
    except Exception as exc:  # pragma: no cover - persistence failure path
        raise _unexpected("delete adjustment", quote_id, exc)
    return schemas.TotalsResponse(totals=_totals(totals))


@router.put(
    "/admin/quotes/{quote_id}/state",
    response_model=schemas.QuoteStateResponse,
)
def change_quote_state(
    quote_id: str,
    payload: schemas.QuoteStateUpdate,
    stores: QuoteStores = Depends(get_quote_stores),
    admin_id: Optional[str] = Depends(get_current_admin_id),
):
    try:
        result = apply_transition(
            stores.quotes, stores.activity, quote_id, payload.new_state, admin_id
        )
    except QuoteError as exc:
        raise quote_error_response(exc)
    return schemas.QuoteStateResponse(
        quote=schemas.QuoteStateRead(
            quote_state=result.quote_state, can_edit=result.can_edit
        )
    )


@router.get(
    "/admin/settings/holidays",
    response_model=schemas.HolidayListResponse,
)
def list_holidays(
    location_id: Optional[str] = None,
    upcoming_only: bool = False,
    holidays: SqlHolidayReader = Depends(get_holiday_reader),
):
    from_date = utcnow().date() if upcoming_only else None
    rows = holidays.list(location_id=location_id, from_date=from_date)
    return schemas.HolidayListResponse(
        holidays=[schemas.HolidayRead.model_validate(h) for h in rows]
    )
