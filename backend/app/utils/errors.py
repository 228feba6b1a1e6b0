from typing import Dict, Optional
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    field_errors: Dict[str, str],
    code: int = status.HTTP_422_UNPROCESSABLE_ENTITY,
) -> HTTPException:
    """Return an HTTPException with a consistent structure and log details."""
    logger.error("%s %s", message, field_errors)
    detail = {"message": message, "field_errors": field_errors}
    return HTTPException(status_code=code, detail=detail)


class QuoteError(ValueError):
    """Base class for quote editing failures reported back to the admin."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.field_errors = field_errors or {}


class QuoteNotFoundError(QuoteError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, quote_id: str):
        super().__init__("Quote not found", {"quote_id": "not_found"})
        self.quote_id = quote_id


class QuoteLockedError(QuoteError):
    def __init__(self, quote_id: str, state: str):
        super().__init__("Quote is locked", {"quote_state": "locked"})
        self.quote_id = quote_id
        self.state = state


class LineItemNotFoundError(QuoteError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, line_item_id: str):
        super().__init__("Line item not found", {"line_item_id": "not_found"})
        self.line_item_id = line_item_id


class LineItemValidationError(QuoteError):
    def __init__(self, field: str, reason: str = "required"):
        super().__init__(f"{field} {reason}", {field: reason})
        self.field = field


class AdjustmentNotFoundError(QuoteError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, adjustment_id: str):
        super().__init__("Adjustment not found", {"adjustment_id": "not_found"})
        self.adjustment_id = adjustment_id


class AdjustmentValidationError(QuoteError):
    def __init__(self, message: str, field: str):
        super().__init__(message, {field: "invalid"})
        self.field = field


class InvalidTransitionError(QuoteError):
    def __init__(self, from_state: str, to_state: str):
        super().__init__(
            f"Invalid transition {from_state} -> {to_state}",
            {"new_state": "invalid_transition"},
        )
        self.from_state = from_state
        self.to_state = to_state


def quote_error_response(exc: QuoteError) -> HTTPException:
    """Translate a domain error into the standard error payload."""
    return error_response(exc.message, exc.field_errors, exc.status_code)
