from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from .. import models
from ..utils.errors import QuoteNotFoundError
from .base import apply_fields


class SqlQuoteStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, quote_id: str) -> Optional[models.QuoteSubmission]:
        return (
            self.db.query(models.QuoteSubmission)
            .filter(models.QuoteSubmission.quote_id == quote_id)
            .first()
        )

    def create(self, **fields: Any) -> models.QuoteSubmission:
        quote = apply_fields(models.QuoteSubmission(), fields)
        self.db.add(quote)
        self.db.commit()
        self.db.refresh(quote)
        return quote

    def update(self, quote_id: str, fields: Mapping[str, Any]) -> models.QuoteSubmission:
        quote = self.get(quote_id)
        if quote is None:
            raise QuoteNotFoundError(quote_id)
        apply_fields(quote, fields)
        self.db.commit()
        self.db.refresh(quote)
        return quote
