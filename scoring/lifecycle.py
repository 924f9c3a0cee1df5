"""Tournament lifecycle: creation, registration window, activation and closing."""

from datetime import datetime, timezone
from typing import Optional, Tuple

from models import (
    Participant,
    Tournament,
    TournamentDetails,
    TournamentStatus,
    TournamentWinners,
)
from scoring.exceptions import ConflictError, InvalidRequestError
from scoring.leaderboard import top_three


def _utc(value: datetime) -> datetime:
    # Naive datetimes from clients are taken as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _now(now: Optional[datetime]) -> datetime:
    return _utc(now) if now else datetime.now(timezone.utc)


def validate_schedule(
    details: TournamentDetails,
    *,
    require_future_start: bool,
    now: Optional[datetime] = None,
) -> None:
    start, end = _utc(details.start_date), _utc(details.end_date)
    if start >= end:
        raise InvalidRequestError("End date must be after start date")
    if require_future_start and start <= _now(now):
        raise InvalidRequestError("Start date must be in the future")


def create_tournament(
    details: TournamentDetails,
    organizer_id: str,
    now: Optional[datetime] = None,
) -> Tournament:
    """Build a new upcoming tournament with no participants or standings."""
    validate_schedule(details, require_future_start=True, now=now)
    return Tournament(
        **details.model_dump(),
        organizer_id=organizer_id,
        participants=[],
        leaderboard=[],
        status=TournamentStatus.UPCOMING,
    )


def update_details(tournament: Tournament, details: TournamentDetails) -> Tournament:
    """Replace the editable fields. Editing does not require a future start."""
    validate_schedule(details, require_future_start=False)
    fields = {name: getattr(details, name) for name in TournamentDetails.model_fields}
    return tournament.model_copy(update=fields, deep=True)


def register(
    tournament: Tournament,
    user_id: str,
    now: Optional[datetime] = None,
) -> Tuple[Tournament, Participant]:
    if tournament.status != TournamentStatus.UPCOMING:
        raise ConflictError("Tournament registration is closed")
    if tournament.is_registered(user_id):
        raise ConflictError("You are already registered for this tournament")
    if tournament.is_full():
        raise ConflictError("Tournament is full")

    participant = Participant(user_id=user_id, registration_date=_now(now), paid=False)
    updated = tournament.model_copy(deep=True)
    updated.participants = updated.participants + [participant]
    return updated, participant


def unregister(tournament: Tournament, user_id: str) -> Tournament:
    """Drop the user's registration. Not being registered is not an error."""
    updated = tournament.model_copy(deep=True)
    updated.participants = [p for p in updated.participants if p.user_id != user_id]
    return updated


def activate(tournament: Tournament) -> Tournament:
    if tournament.status != TournamentStatus.UPCOMING:
        raise ConflictError(f"Only upcoming tournaments can be started (status is {tournament.status.value})")
    updated = tournament.model_copy(deep=True)
    updated.status = TournamentStatus.ACTIVE
    return updated


def close(tournament: Tournament) -> Tuple[Tournament, TournamentWinners]:
    """Complete the tournament and read the winners off the current leaderboard."""
    if tournament.status == TournamentStatus.COMPLETED:
        raise ConflictError("Tournament is already completed")
    updated = tournament.model_copy(deep=True)
    updated.status = TournamentStatus.COMPLETED
    return updated, top_three(updated.leaderboard)
