from sqlalchemy import Column, DateTime, Integer, JSON, String

from ..database import Base
from .base import utcnow


class AdminActivityLog(Base):
    __tablename__ = "admin_activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String(128), nullable=False, index=True)
    actor_id = Column(String(64), nullable=True)
    target_id = Column(String(64), nullable=True, index=True)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
