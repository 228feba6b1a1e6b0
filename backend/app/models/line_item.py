import uuid

from sqlalchemy import Column, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class LineItemSource:
    MANUAL = "manual"
    ANALYSIS = "analysis"


class QuoteSubOrder(BaseModel):
    """One billable document/service line of a quote."""

    __tablename__ = "quote_sub_orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    quote_id = Column(
        String(36),
        ForeignKey("quote_submissions.quote_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_id = Column(String(64), nullable=True)
    filename = Column(String(255), nullable=True)
    doc_type = Column(String(255), nullable=True)
    billable_pages = Column(Numeric(10, 2), nullable=True)
    unit_rate = Column(Numeric(10, 2), nullable=True)
    unit_rate_override = Column(Numeric(10, 2), nullable=True)
    override_reason = Column(String(500), nullable=True)
    certification_type_name = Column(String(255), nullable=True)
    certification_amount = Column(Numeric(10, 2), nullable=True)
    source_language = Column(String(64), nullable=True)
    target_language = Column(String(64), nullable=True)
    line_total = Column(Numeric(12, 2), nullable=True)
    source = Column(String(32), nullable=False, default=LineItemSource.ANALYSIS)

    quote = relationship("QuoteSubmission", back_populates="line_items")
