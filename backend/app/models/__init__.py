from .quote import QuoteSubmission, QuoteState
from .quote_results import QuoteResults
from .line_item import QuoteSubOrder, LineItemSource
from .adjustment import QuoteAdjustment, AdjustmentType, DiscountType
from .holiday import CompanyHoliday
from .app_setting import AppSetting
from .activity_log import AdminActivityLog

__all__ = [
    "QuoteSubmission",
    "QuoteState",
    "QuoteResults",
    "QuoteSubOrder",
    "LineItemSource",
    "QuoteAdjustment",
    "AdjustmentType",
    "DiscountType",
    "CompanyHoliday",
    "AppSetting",
    "AdminActivityLog",
]
