"""Quote lifecycle rules.

``is_locked`` is the single source of truth for whether a quote's priced
content may change; every mutating operation goes through
``ensure_editable``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..models.base import utcnow
from ..models.quote import QuoteState
from ..utils.errors import InvalidTransitionError, QuoteLockedError, QuoteNotFoundError
from .activity_log import log_activity_safely
from .stores import ActivityLogger, QuoteStore, read_field

logger = logging.getLogger(__name__)

ALLOWED_STATES = frozenset(s.value for s in QuoteState)

LOCKED_STATES = frozenset(
    {QuoteState.SENT.value, QuoteState.ACCEPTED.value, QuoteState.CONVERTED.value}
)

PRIMARY_FLOW = (
    QuoteState.DRAFT.value,
    QuoteState.UNDER_REVIEW.value,
    QuoteState.READY.value,
    QuoteState.SENT.value,
)

# Admin overrides reachable from any state.
ADMINISTRATIVE_STATES = frozenset(
    {
        QuoteState.PENDING.value,
        QuoteState.HITL_REQUIRED.value,
        QuoteState.ACCEPTED.value,
        QuoteState.EXPIRED.value,
        QuoteState.CONVERTED.value,
        QuoteState.ABANDONED.value,
        QuoteState.OPEN.value,
        QuoteState.ARCHIVED.value,
    }
)


def _normalize(state: Any) -> str:
    if isinstance(state, QuoteState):
        return state.value
    return str(state or "").strip().lower()


def is_locked(state: Any) -> bool:
    return _normalize(state) in LOCKED_STATES


def can_transition(from_state: Any, to_state: Any) -> bool:
    src = _normalize(from_state)
    dst = _normalize(to_state)
    if dst not in ALLOWED_STATES:
        return False
    if src == dst:
        return True
    if src in PRIMARY_FLOW and dst in PRIMARY_FLOW:
        src_idx = PRIMARY_FLOW.index(src)
        dst_idx = PRIMARY_FLOW.index(dst)
        return dst_idx >= src_idx or (
            src == QuoteState.READY.value and dst == QuoteState.UNDER_REVIEW.value
        )
    return dst in ADMINISTRATIVE_STATES


def current_state(quote: Any) -> str:
    return _normalize(read_field(quote, "quote_state")) or QuoteState.DRAFT.value


def ensure_editable(quotes: QuoteStore, quote_id: str) -> Any:
    """Load the quote and reject it when its state freezes priced content."""
    quote = quotes.get(quote_id)
    if quote is None:
        raise QuoteNotFoundError(quote_id)
    state = current_state(quote)
    if is_locked(state):
        logger.info("Rejected edit of quote %s in locked state %s", quote_id, state)
        raise QuoteLockedError(quote_id, state)
    return quote


def stamp_edit(quotes: QuoteStore, quote_id: str, actor_id: Optional[str]) -> None:
    quotes.update(quote_id, {"last_edited_by": actor_id, "last_edited_at": utcnow()})


@dataclass
class TransitionResult:
    quote_id: str
    from_state: str
    quote_state: str
    can_edit: bool


def apply_transition(
    quotes: QuoteStore,
    activity: ActivityLogger,
    quote_id: str,
    new_state: str,
    actor_id: Optional[str] = None,
) -> TransitionResult:
    quote = quotes.get(quote_id)
    if quote is None:
        raise QuoteNotFoundError(quote_id)
    from_state = current_state(quote)
    to_state = _normalize(new_state)
    if not can_transition(from_state, to_state):
        raise InvalidTransitionError(from_state, str(new_state))

    now = utcnow()
    updated = quotes.update(
        quote_id,
        {
            "quote_state": to_state,
            "state_changed_at": now,
            "state_changed_by": actor_id,
            "last_edited_by": actor_id,
            "last_edited_at": now,
        },
    )
    log_activity_safely(
        activity,
        "quote_state_changed",
        actor_id,
        quote_id,
        {"from": from_state, "to": to_state},
    )
    final_state = _normalize(read_field(updated, "quote_state")) or to_state
    return TransitionResult(
        quote_id=quote_id,
        from_state=from_state,
        quote_state=final_state,
        can_edit=not is_locked(final_state),
    )
