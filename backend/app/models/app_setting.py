from sqlalchemy import Column, String

from .base import BaseModel


class AppSetting(BaseModel):
    __tablename__ = "app_settings"

    setting_key = Column(String(128), primary_key=True)
    setting_value = Column(String, nullable=True)
    description = Column(String(500), nullable=True)
