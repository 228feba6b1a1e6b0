from typing import Any, Mapping, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from .. import models


class SqlActivityLogger:
    def __init__(self, db: Session):
        self.db = db

    def log(
        self,
        action: str,
        actor_id: Optional[str],
        target_id: Optional[str],
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        entry = models.AdminActivityLog(
            action=action,
            actor_id=actor_id,
            target_id=target_id,
            details=jsonable_encoder(details) if details is not None else None,
        )
        self.db.add(entry)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
