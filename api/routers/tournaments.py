"""Tournament API endpoints: admin management, registration and closing."""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List
from database.db_manager import DatabaseManager
from api.dependencies import get_current_user, get_db, require_admin
from api.errors import DOMAIN_ERRORS, http_error
from api.schemas import CloseTournamentResponse, MessageResponse, TournamentSummaryResponse
from models import Tournament, TournamentDetails, User
from scoring import lifecycle

router = APIRouter()


def summarize_tournament(t: Tournament) -> TournamentSummaryResponse:
    return TournamentSummaryResponse(
        id=t.id,
        name=t.name,
        description=t.description,
        course_name=t.course_name,
        organizer_name=t.organizer_name,
        start_date=t.start_date,
        end_date=t.end_date,
        format=t.format,
        max_participants=t.max_participants,
        participant_count=len(t.participants),
        entry_fee=t.entry_fee,
        status=t.status,
    )


@router.get("", response_model=List[TournamentSummaryResponse])
async def list_tournaments(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: DatabaseManager = Depends(get_db),
):
    tournaments = await db.tournaments.list_tournaments(limit=limit, offset=offset)
    return [summarize_tournament(t) for t in tournaments]


@router.get("/{tournament_id}", response_model=Tournament)
async def get_tournament(tournament_id: str, db: DatabaseManager = Depends(get_db)):
    """Full tournament: participants, leaderboard and course/organizer names."""
    try:
        tournament = await db.tournaments.get_tournament(tournament_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Tournament not found")
    if not tournament:
        raise HTTPException(404, "Tournament not found")
    return tournament


@router.post("", response_model=TournamentSummaryResponse, status_code=201)
async def create_tournament(
    req: TournamentDetails,
    admin: User = Depends(require_admin),
    db: DatabaseManager = Depends(get_db),
):
    try:
        if await db.courses.get_course(req.course_id) is None:
            raise HTTPException(404, "Course not found")
        tournament = lifecycle.create_tournament(req, organizer_id=admin.id)
        created = await db.tournaments.create_tournament(tournament)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Course not found")
    return summarize_tournament(created)


@router.put("/{tournament_id}", response_model=TournamentSummaryResponse)
async def update_tournament(
    tournament_id: str,
    req: TournamentDetails,
    admin: User = Depends(require_admin),
    db: DatabaseManager = Depends(get_db),
):
    try:
        updated = await db.tournaments.update_details(tournament_id, req)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Tournament not found")
    return summarize_tournament(updated)


@router.post("/{tournament_id}/register", response_model=MessageResponse)
async def register(
    tournament_id: str,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    try:
        await db.tournaments.register(tournament_id, user.id)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Tournament not found")
    return MessageResponse(message="Successfully registered for tournament")


@router.delete("/{tournament_id}/register", response_model=MessageResponse)
async def unregister(
    tournament_id: str,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    try:
        await db.tournaments.unregister(tournament_id, user.id)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Tournament not found")
    return MessageResponse(message="Successfully unregistered from tournament")


@router.post("/{tournament_id}/activate", response_model=TournamentSummaryResponse)
async def activate(
    tournament_id: str,
    admin: User = Depends(require_admin),
    db: DatabaseManager = Depends(get_db),
):
    """Start play: registration closes once a tournament is active."""
    try:
        updated = await db.tournaments.activate(tournament_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Tournament not found")
    return summarize_tournament(updated)


@router.post("/{tournament_id}/close", response_model=CloseTournamentResponse)
async def close(
    tournament_id: str,
    admin: User = Depends(require_admin),
    db: DatabaseManager = Depends(get_db),
):
    try:
        tournament, winners = await db.tournaments.close(tournament_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Tournament not found")
    return CloseTournamentResponse(
        id=tournament.id,
        name=tournament.name,
        status=tournament.status,
        winners=winners,
    )
