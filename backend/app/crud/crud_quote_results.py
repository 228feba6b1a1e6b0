import logging
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from .. import models
from .base import apply_fields

logger = logging.getLogger(__name__)


class QuoteResultsMissing(LookupError):
    pass


class SqlQuoteResultsStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, quote_id: str) -> Optional[models.QuoteResults]:
        return (
            self.db.query(models.QuoteResults)
            .filter(models.QuoteResults.quote_id == quote_id)
            .first()
        )

    def update(self, quote_id: str, fields: Mapping[str, Any]) -> models.QuoteResults:
        results = self.get(quote_id)
        if results is None:
            raise QuoteResultsMissing(f"No quote results for {quote_id}")
        apply_fields(results, fields)
        self.db.commit()
        self.db.refresh(results)
        return results

    def upsert(self, quote_id: str, fields: Mapping[str, Any]) -> models.QuoteResults:
        results = self.get(quote_id)
        if results is None:
            results = models.QuoteResults(quote_id=quote_id)
            self.db.add(results)
        apply_fields(results, fields)
        self.db.commit()
        self.db.refresh(results)
        return results
