from .quote_admin import (
    LineItemUpdates,
    LineItemUpdateRequest,
    ManualLineItemCreate,
    AdjustmentCreate,
    QuoteStateUpdate,
    CalculateDeliveryRequest,
    LineItemRead,
    AdjustmentRead,
    QuoteTotalsRead,
    QuoteResultsRead,
    DeliveryInfoRead,
    LineItemMutationResponse,
    AdjustmentMutationResponse,
    TotalsResponse,
    QuoteStateRead,
    QuoteStateResponse,
    CalculateDeliveryResponse,
    HolidayRead,
    HolidayListResponse,
    PublicSettings,
)
