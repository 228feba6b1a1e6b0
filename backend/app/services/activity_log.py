from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .stores import ActivityLogger

logger = logging.getLogger(__name__)


def log_activity_safely(
    activity: ActivityLogger,
    action: str,
    actor_id: Optional[str],
    target_id: Optional[str],
    details: Optional[Mapping[str, Any]] = None,
) -> bool:
    """Record an audit entry; an audit-sink outage never fails the caller."""
    try:
        activity.log(action, actor_id, target_id, details)
    except Exception as exc:
        logger.warning(
            "Failed to record admin activity %s for %s: %s",
            action,
            target_id,
            exc,
            exc_info=True,
        )
        return False
    return True
