import enum
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from .base import BaseModel


class QuoteState(str, enum.Enum):
    DRAFT = "draft"
    PENDING = "pending"
    HITL_REQUIRED = "hitl_required"
    UNDER_REVIEW = "under_review"
    READY = "ready"
    SENT = "sent"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    CONVERTED = "converted"
    ABANDONED = "abandoned"
    OPEN = "open"
    ARCHIVED = "archived"


def _new_id() -> str:
    return str(uuid.uuid4())


class QuoteSubmission(BaseModel):
    __tablename__ = "quote_submissions"

    quote_id = Column(String(36), primary_key=True, default=_new_id)
    quote_number = Column(String(32), nullable=True, unique=True)
    # Plain string column: legacy rows hold mixed-case states, and the state
    # machine compares case-insensitively.
    quote_state = Column(String(32), nullable=False, default=QuoteState.DRAFT.value)
    state_changed_at = Column(DateTime, nullable=True)
    state_changed_by = Column(String(64), nullable=True)
    last_edited_by = Column(String(64), nullable=True)
    last_edited_at = Column(DateTime, nullable=True)

    results = relationship(
        "QuoteResults",
        back_populates="quote",
        uselist=False,
        cascade="all, delete-orphan",
    )
    line_items = relationship(
        "QuoteSubOrder",
        back_populates="quote",
        cascade="all, delete-orphan",
    )
    adjustments = relationship(
        "QuoteAdjustment",
        back_populates="quote",
        cascade="all, delete-orphan",
    )
