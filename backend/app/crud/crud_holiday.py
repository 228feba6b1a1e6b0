from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from .. import models


class SqlHolidayReader:
    def __init__(self, db: Session):
        self.db = db

    def list_holidays(self, location_id: str, from_date: date) -> list[models.CompanyHoliday]:
        return self.list(location_id=location_id, from_date=from_date)

    def list(
        self,
        location_id: Optional[str] = None,
        from_date: Optional[date] = None,
    ) -> list[models.CompanyHoliday]:
        query = self.db.query(models.CompanyHoliday)
        if location_id:
            query = query.filter(models.CompanyHoliday.location_id == location_id)
        if from_date is not None:
            query = query.filter(models.CompanyHoliday.holiday_date >= from_date)
        return query.order_by(models.CompanyHoliday.holiday_date).all()
