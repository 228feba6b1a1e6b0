from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from ..crud import quote_stores, SqlHolidayReader, SqlSettingsReader
from ..database import get_db
from ..services.stores import QuoteStores


def get_current_admin_id(x_admin_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Acting admin as resolved by the auth proxy in front of this service."""
    if x_admin_id is None:
        return None
    return x_admin_id.strip() or None


def get_quote_stores(db: Session = Depends(get_db)) -> QuoteStores:
    return quote_stores(db)


def get_settings_reader(db: Session = Depends(get_db)) -> SqlSettingsReader:
    return SqlSettingsReader(db)


def get_holiday_reader(db: Session = Depends(get_db)) -> SqlHolidayReader:
    return SqlHolidayReader(db)
