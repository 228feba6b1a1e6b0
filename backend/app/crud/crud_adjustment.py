from typing import Any, Mapping

from sqlalchemy.orm import Session

from .. import models
from .base import apply_fields


class SqlAdjustmentStore:
    def __init__(self, db: Session):
        self.db = db

    def list_for_quote(self, quote_id: str) -> list[models.QuoteAdjustment]:
        return (
            self.db.query(models.QuoteAdjustment)
            .filter(models.QuoteAdjustment.quote_id == quote_id)
            .order_by(models.QuoteAdjustment.created_at)
            .all()
        )

    def insert(self, quote_id: str, fields: Mapping[str, Any]) -> models.QuoteAdjustment:
        row = apply_fields(models.QuoteAdjustment(quote_id=quote_id), fields)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, quote_id: str, adjustment_id: str) -> bool:
        row = (
            self.db.query(models.QuoteAdjustment)
            .filter(
                models.QuoteAdjustment.quote_id == quote_id,
                models.QuoteAdjustment.id == adjustment_id,
            )
            .first()
        )
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True
