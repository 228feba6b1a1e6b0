"""Collaborator interfaces the quote services depend on.

The SQLAlchemy implementations live in ``app.crud``; tests substitute mocks.
Records may be ORM objects or plain mappings; services read them through
``read_field``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Protocol


def read_field(source: Any, key: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


class SettingsReader(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...


class HolidayReader(Protocol):
    def list_holidays(self, location_id: str, from_date: date) -> Iterable[Any]:
        """Holiday records (with ``holiday_date``) on or after ``from_date``."""
        ...


class QuoteStore(Protocol):
    def get(self, quote_id: str) -> Optional[Any]: ...

    def update(self, quote_id: str, fields: Mapping[str, Any]) -> Any: ...


class QuoteResultsStore(Protocol):
    def get(self, quote_id: str) -> Optional[Any]: ...

    def update(self, quote_id: str, fields: Mapping[str, Any]) -> Any:
        """Update an existing row; raises when the quote has no results."""
        ...

    def upsert(self, quote_id: str, fields: Mapping[str, Any]) -> Any: ...


class LineItemStore(Protocol):
    def list_for_quote(self, quote_id: str) -> list[Any]: ...

    def get(self, quote_id: str, line_item_id: str) -> Optional[Any]: ...

    def insert(self, quote_id: str, fields: Mapping[str, Any]) -> Any: ...

    def update(self, quote_id: str, line_item_id: str, fields: Mapping[str, Any]) -> Any: ...

    def delete(self, quote_id: str, line_item_id: str) -> bool: ...


class AdjustmentStore(Protocol):
    def list_for_quote(self, quote_id: str) -> list[Any]: ...

    def insert(self, quote_id: str, fields: Mapping[str, Any]) -> Any: ...

    def delete(self, quote_id: str, adjustment_id: str) -> bool: ...


class ActivityLogger(Protocol):
    def log(
        self,
        action: str,
        actor_id: Optional[str],
        target_id: Optional[str],
        details: Optional[Mapping[str, Any]] = None,
    ) -> None: ...


@dataclass
class QuoteStores:
    """The collaborators a quote-editing request needs, bundled per request."""

    quotes: QuoteStore
    results: QuoteResultsStore
    line_items: LineItemStore
    adjustments: AdjustmentStore
    activity: ActivityLogger
