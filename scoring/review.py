"""Round review state machine: submitted -> confirmed | rejected."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from models import Round, RoundStatus
from scoring.exceptions import ConflictError, ForbiddenError, InvalidRequestError


class ReviewAction(str, Enum):
    CONFIRM = "confirm"
    REJECT = "reject"


def ensure_can_edit(round_: Round, editor_id: str, editor_is_admin: bool) -> None:
    """Raise unless the editor may change this round."""
    if editor_is_admin:
        return
    if not round_.is_owned_by(editor_id):
        raise ForbiddenError("Access denied")
    if round_.status == RoundStatus.CONFIRMED:
        raise ForbiddenError("Cannot edit confirmed scores")


def apply_edit(
    round_: Round,
    changes: Dict[str, Any],
    *,
    editor_id: str,
    editor_is_admin: bool,
) -> Round:
    """Return a copy of the round with ``changes`` applied.

    An owner's edit sends the round back for review. An administrator's edit keeps
    the review state exactly as it was.
    """
    ensure_can_edit(round_, editor_id, editor_is_admin)

    edited = round_.model_copy(deep=True)
    errors = edited.apply_changes(**changes)
    if errors:
        detail = "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        raise InvalidRequestError(f"Invalid round data - {detail}")

    if not editor_is_admin:
        edited.status = RoundStatus.SUBMITTED
        edited.confirmed_by = None
        edited.confirmed_at = None
    return edited


def review(
    round_: Round,
    action: ReviewAction,
    reviewer_id: str,
    now: Optional[datetime] = None,
) -> Round:
    """Confirm or reject a round that is not yet confirmed.

    A rejected round may be reviewed again (e.g. after the owner fixes it).
    """
    if round_.status == RoundStatus.CONFIRMED:
        raise ConflictError("Round is already confirmed")

    reviewed = round_.model_copy(deep=True)
    reviewed.status = (
        RoundStatus.CONFIRMED if action is ReviewAction.CONFIRM else RoundStatus.REJECTED
    )
    reviewed.confirmed_by = reviewer_id
    reviewed.confirmed_at = now or datetime.now(timezone.utc)
    return reviewed
