from sqlalchemy import Column, Date, DateTime, ForeignKey, JSON, Numeric, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class QuoteResults(BaseModel):
    """Cached pricing and delivery figures; exactly one row per quote."""

    __tablename__ = "quote_results"

    quote_id = Column(
        String(36),
        ForeignKey("quote_submissions.quote_id", ondelete="CASCADE"),
        primary_key=True,
    )
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    shipping_total = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="CAD")
    results_json = Column(JSON, nullable=True)
    computed_at = Column(DateTime, nullable=True)

    # Delivery / expiry enrichment
    estimated_delivery_date = Column(Date, nullable=True)
    delivery_estimate_text = Column(String(255), nullable=True)
    quote_expires_at = Column(DateTime, nullable=True)
    location_id = Column(String(64), nullable=True)

    quote = relationship("QuoteSubmission", back_populates="results")
