from typing import Any

from sqlalchemy.orm import Session

from .. import models


class SqlSettingsReader:
    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str, default: Any = None) -> Any:
        row = (
            self.db.query(models.AppSetting)
            .filter(models.AppSetting.setting_key == key)
            .first()
        )
        if row is None or row.setting_value is None:
            return default
        return row.setting_value
