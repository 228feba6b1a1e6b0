from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from .. import models
from .base import apply_fields


class SqlLineItemStore:
    def __init__(self, db: Session):
        self.db = db

    def _query(self, quote_id: str):
        return self.db.query(models.QuoteSubOrder).filter(
            models.QuoteSubOrder.quote_id == quote_id
        )

    def list_for_quote(self, quote_id: str) -> list[models.QuoteSubOrder]:
        return self._query(quote_id).order_by(models.QuoteSubOrder.created_at).all()

    def get(self, quote_id: str, line_item_id: str) -> Optional[models.QuoteSubOrder]:
        return self._query(quote_id).filter(models.QuoteSubOrder.id == line_item_id).first()

    def insert(self, quote_id: str, fields: Mapping[str, Any]) -> models.QuoteSubOrder:
        row = apply_fields(models.QuoteSubOrder(quote_id=quote_id), fields)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def update(
        self, quote_id: str, line_item_id: str, fields: Mapping[str, Any]
    ) -> Optional[models.QuoteSubOrder]:
        row = self.get(quote_id, line_item_id)
        if row is None:
            return None
        apply_fields(row, fields)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, quote_id: str, line_item_id: str) -> bool:
        row = self.get(quote_id, line_item_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True
