import enum
import uuid

from sqlalchemy import Boolean, Column, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class AdjustmentType(str, enum.Enum):
    ADDITIONAL_ITEM = "additional_item"
    DISCOUNT = "discount"
    SURCHARGE = "surcharge"


class DiscountType(str, enum.Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class QuoteAdjustment(BaseModel):
    __tablename__ = "quote_adjustments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    quote_id = Column(
        String(36),
        ForeignKey("quote_submissions.quote_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(String(32), nullable=False)
    description = Column(String(500), nullable=True)
    is_taxable = Column(Boolean, nullable=False, default=True)
    quantity = Column(Numeric(10, 2), nullable=True)
    unit_amount = Column(Numeric(12, 2), nullable=True)
    discount_type = Column(String(16), nullable=True)
    discount_value = Column(Numeric(12, 2), nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)

    quote = relationship("QuoteSubmission", back_populates="adjustments")
