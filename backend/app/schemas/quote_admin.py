from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LineItemUpdates(BaseModel):
    """Sparse line-item patch; numeric fields accept raw admin input."""

    model_config = ConfigDict(extra="ignore")

    billable_pages: Any = None
    unit_rate: Any = None
    unit_rate_override: Any = None
    override_reason: Optional[str] = None
    certification_type_name: Optional[str] = None
    certification_amount: Any = None
    source_language: Optional[str] = None
    target_language: Optional[str] = None


class LineItemUpdateRequest(BaseModel):
    # Checked by the service once the quote is known to be editable
    line_item_id: Optional[str] = None
    updates: Optional[LineItemUpdates] = None


class ManualLineItemCreate(BaseModel):
    file_id: Optional[str] = None
    filename: Optional[str] = None
    doc_type: Optional[str] = None
    billable_pages: Any = None
    unit_rate: Any = None
    source_language: Optional[str] = None
    target_language: Optional[str] = None


class AdjustmentCreate(BaseModel):
    type: str
    description: Optional[str] = None
    is_taxable: Optional[bool] = None
    quantity: Any = None
    unit_amount: Any = None
    discount_type: Optional[str] = None
    discount_value: Any = None


class QuoteStateUpdate(BaseModel):
    new_state: str = Field(min_length=1)


class CalculateDeliveryRequest(BaseModel):
    quote_id: str = Field(min_length=1)
    location_id: Optional[str] = None


class LineItemRead(BaseModel):
    id: str
    quote_id: str
    file_id: Optional[str] = None
    filename: Optional[str] = None
    doc_type: Optional[str] = None
    billable_pages: Optional[float] = None
    unit_rate: Optional[float] = None
    unit_rate_override: Optional[float] = None
    override_reason: Optional[str] = None
    certification_type_name: Optional[str] = None
    certification_amount: Optional[float] = None
    source_language: Optional[str] = None
    target_language: Optional[str] = None
    line_total: Optional[float] = None
    source: str

    model_config = ConfigDict(from_attributes=True)


class AdjustmentRead(BaseModel):
    id: str
    quote_id: str
    type: str
    description: Optional[str] = None
    is_taxable: bool
    quantity: Optional[float] = None
    unit_amount: Optional[float] = None
    discount_type: Optional[str] = None
    discount_value: Optional[float] = None
    total_amount: float

    model_config = ConfigDict(from_attributes=True)


class QuoteTotalsRead(BaseModel):
    translation: float
    certification: float
    additional_items: float
    discounts_or_surcharges: float
    subtotal: float
    tax: float
    total: float


class QuoteResultsRead(BaseModel):
    quote_id: str
    subtotal: float
    tax: float
    total: float
    currency: str
    computed_at: Optional[datetime] = None
    estimated_delivery_date: Optional[date] = None
    delivery_estimate_text: Optional[str] = None
    quote_expires_at: Optional[datetime] = None
    location_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DeliveryInfoRead(BaseModel):
    estimated_delivery_date: date
    turnaround_time: str
    expiry_date: datetime
    expiry_days: int
    skipped_holidays: int

    model_config = ConfigDict(from_attributes=True)


class LineItemMutationResponse(BaseModel):
    success: bool = True
    line_item: Optional[LineItemRead] = None
    totals: QuoteTotalsRead


class AdjustmentMutationResponse(BaseModel):
    success: bool = True
    adjustment: AdjustmentRead
    totals: QuoteTotalsRead


class TotalsResponse(BaseModel):
    success: bool = True
    totals: QuoteTotalsRead


class QuoteStateRead(BaseModel):
    quote_state: str
    can_edit: bool


class QuoteStateResponse(BaseModel):
    success: bool = True
    quote: QuoteStateRead


class CalculateDeliveryResponse(BaseModel):
    success: bool = True
    quote: QuoteResultsRead
    delivery_info: DeliveryInfoRead = Field(serialization_alias="deliveryInfo")


class HolidayRead(BaseModel):
    id: int
    location_id: str
    holiday_name: str
    holiday_date: date
    description: Optional[str] = None
    is_closed: bool

    model_config = ConfigDict(from_attributes=True)


class HolidayListResponse(BaseModel):
    success: bool = True
    holidays: List[HolidayRead]


class PublicSettings(BaseModel):
    default_currency: str
    default_turnaround_time: str
    quote_expiry_days: int
