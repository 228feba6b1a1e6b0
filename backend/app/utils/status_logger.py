import logging
from sqlalchemy import event
from sqlalchemy.orm.attributes import NO_VALUE

from .. import models

logger = logging.getLogger(__name__)

_registered = False


def _listener_factory(model_name: str, id_attr: str):
    """Return a SQLAlchemy attribute listener that logs state changes."""

    def _state_change(target, value, oldvalue, initiator):  # noqa: ANN001
        if oldvalue is NO_VALUE or oldvalue is None or oldvalue == value:
            return value
        entity_id = getattr(target, id_attr, "unknown")
        logger.info(
            "%s id=%s state changed from %s to %s",
            model_name,
            entity_id,
            oldvalue,
            value,
        )
        return value

    return _state_change


def register_status_listeners() -> None:
    """Attach listeners to the lifecycle column of quote submissions."""
    global _registered
    if _registered:
        return
    event.listen(
        models.QuoteSubmission.quote_state,
        "set",
        _listener_factory(models.QuoteSubmission.__name__, "quote_id"),
        retval=False,
        propagate=True,
    )
    _registered = True
