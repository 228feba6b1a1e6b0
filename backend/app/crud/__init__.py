from sqlalchemy.orm import Session

from .crud_quote import SqlQuoteStore
from .crud_quote_results import SqlQuoteResultsStore, QuoteResultsMissing
from .crud_line_item import SqlLineItemStore
from .crud_adjustment import SqlAdjustmentStore
from .crud_holiday import SqlHolidayReader
from .crud_settings import SqlSettingsReader
from .crud_activity import SqlActivityLogger
from ..services.stores import QuoteStores


def quote_stores(db: Session) -> QuoteStores:
    """Bind every quote collaborator to one request-scoped session."""
    return QuoteStores(
        quotes=SqlQuoteStore(db),
        results=SqlQuoteResultsStore(db),
        line_items=SqlLineItemStore(db),
        adjustments=SqlAdjustmentStore(db),
        activity=SqlActivityLogger(db),
    )
