from sqlalchemy import Boolean, Column, Date, Integer, String

from .base import BaseModel


class CompanyHoliday(BaseModel):
    """A closure date for one fulfillment location."""

    __tablename__ = "company_holidays"

    id = Column(Integer, primary_key=True, index=True)
    location_id = Column(String(64), nullable=False, index=True)
    holiday_name = Column(String(255), nullable=False)
    holiday_date = Column(Date, nullable=False, index=True)
    description = Column(String(500), nullable=True)
    is_closed = Column(Boolean, nullable=False, default=True)
