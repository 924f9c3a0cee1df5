"""Conversion between asyncpg database rows and Pydantic domain models.

Centralizes all mapping logic between the normalized DB schema
and the nested Pydantic models.
"""

import json
from typing import List, Optional
from uuid import UUID

from database.exceptions import NotFoundError
from models import (
    Course,
    Hole,
    HoleScore,
    LeaderboardEntry,
    Location,
    Participant,
    Preferences,
    PlayerStats,
    Prizes,
    Round,
    Tournament,
    User,
    Weather,
)


def to_uuid(value: str) -> UUID:
    """Parse an id; an unparseable id can never match a row, so treat it as missing."""
    try:
        return UUID(str(value))
    except ValueError as e:
        raise NotFoundError(f"No entity with id {value!r}") from e


def _opt_str(value) -> Optional[str]:
    return str(value) if value is not None else None


def _json(value) -> dict:
    # JSONB comes back as text unless a type codec is registered on the pool
    if value is None:
        return {}
    if isinstance(value, str):
        return json.loads(value)
    return dict(value)


# ================================================================
# Row -> Model (reads)
# ================================================================

def user_from_row(row) -> User:
    """users.users row -> User model."""
    return User(
        id=str(row["id"]),
        email=row["email"],
        name=row["name"],
        password_hash=row["password_hash"],
        handicap=float(row["handicap"]) if row["handicap"] is not None else 0,
        role=row["role"],
        status=row["status"],
        stats=stats_from_row(row),
        preferences=Preferences(**_json(row["preferences"])),
        created_at=row["created_at"],
    )


def stats_from_row(row) -> PlayerStats:
    return PlayerStats(
        total_rounds=row["stats_total_rounds"],
        average_score=row["stats_average_score"],
        best_round=row["stats_best_round"],
        total_birdies=row["stats_total_birdies"],
        total_eagles=row["stats_total_eagles"],
    )


def hole_from_row(row) -> Hole:
    """courses.holes row -> Hole model."""
    return Hole(
        number=row["hole_number"],
        par=row["par"],
        handicap=row["handicap"],
        yardage={color: int(y) for color, y in _json(row["yardages"]).items()},
    )


def course_from_rows(course_row, hole_rows: list) -> Course:
    """Assemble a full Course from its row and hole rows."""
    return Course(
        id=str(course_row["id"]),
        name=course_row["name"],
        location=Location(
            address=course_row["address"],
            city=course_row["city"],
            state=course_row["state"],
            country=course_row["country"],
        ),
        holes=[hole_from_row(r) for r in hole_rows],
        slope_rating=float(course_row["slope_rating"]) if course_row["slope_rating"] is not None else None,
        course_rating=float(course_row["course_rating"]) if course_row["course_rating"] is not None else None,
        created_at=course_row["created_at"],
    )


def hole_score_from_row(row) -> HoleScore:
    """users.hole_scores row -> HoleScore model (strokes_over_par is recomputed)."""
    return HoleScore(
        hole_number=row["hole_number"],
        par=row["par"],
        strokes=row["strokes"],
        putts=row["putts"],
        club=row["club"],
    )


def round_from_rows(round_row, hole_score_rows: list) -> Round:
    """Assemble a Round from its row (plus joined display names) and hole score rows."""
    weather = _json(round_row["weather"]) if round_row["weather"] is not None else None
    return Round(
        id=str(round_row["id"]),
        user_id=str(round_row["user_id"]),
        course_id=str(round_row["course_id"]),
        tournament_id=_opt_str(round_row["tournament_id"]),
        date=round_row["round_date"],
        tee=round_row["tee"],
        hole_scores=[hole_score_from_row(r) for r in hole_score_rows],
        weather=Weather(**weather) if weather is not None else None,
        notes=round_row["notes"],
        status=round_row["status"],
        confirmed_by=_opt_str(round_row["confirmed_by"]),
        confirmed_at=round_row["confirmed_at"],
        created_at=round_row["created_at"],
        course_name=round_row.get("course_name"),
        tournament_name=round_row.get("tournament_name"),
        player_name=round_row.get("player_name"),
    )


def participant_from_row(row) -> Participant:
    return Participant(
        user_id=str(row["user_id"]),
        registration_date=row["registration_date"],
        paid=row["paid"],
    )


def leaderboard_entry_from_row(row) -> LeaderboardEntry:
    return LeaderboardEntry(
        user_id=str(row["user_id"]),
        total_score=row["total_score"],
        round_ids=[str(r) for r in (row["round_ids"] or [])],
        player_name=row.get("player_name"),
    )


def tournament_from_rows(
    tournament_row,
    participant_rows: list,
    leaderboard_rows: list,
) -> Tournament:
    """Assemble a Tournament; leaderboard rows must already be ordered by position."""
    return Tournament(
        id=str(tournament_row["id"]),
        name=tournament_row["name"],
        description=tournament_row["description"],
        course_id=str(tournament_row["course_id"]),
        organizer_id=str(tournament_row["organizer_id"]),
        start_date=tournament_row["start_date"],
        end_date=tournament_row["end_date"],
        format=tournament_row["format"],
        max_participants=tournament_row["max_participants"],
        entry_fee=float(tournament_row["entry_fee"]),
        prizes=Prizes(**_json(tournament_row["prizes"])),
        participants=[participant_from_row(r) for r in participant_rows],
        leaderboard=[leaderboard_entry_from_row(r) for r in leaderboard_rows],
        status=tournament_row["status"],
        created_at=tournament_row["created_at"],
        course_name=tournament_row.get("course_name"),
        organizer_name=tournament_row.get("organizer_name"),
    )


# ================================================================
# Model -> Row (writes)
# ================================================================

def course_to_row(course: Course) -> dict:
    """Course -> dict for courses.courses INSERT."""
    return {
        "name": course.name,
        "address": course.location.address,
        "city": course.location.city,
        "state": course.location.state,
        "country": course.location.country,
        "slope_rating": course.slope_rating,
        "course_rating": course.course_rating,
    }


def hole_to_row(hole: Hole, course_id: UUID) -> tuple:
    """Hole -> tuple for courses.holes INSERT (for executemany)."""
    return (course_id, hole.number, hole.par, hole.handicap, json.dumps(hole.yardage))


def hole_score_to_row(hs: HoleScore, round_id: UUID) -> tuple:
    """HoleScore -> tuple for users.hole_scores INSERT."""
    return (
        round_id, hs.hole_number, hs.par, hs.strokes,
        hs.strokes_over_par, hs.putts, hs.club,
    )


def round_to_row(round_: Round) -> dict:
    """Round -> dict for users.rounds INSERT/UPDATE."""
    return {
        "user_id": to_uuid(round_.user_id),
        "course_id": to_uuid(round_.course_id),
        "tournament_id": to_uuid(round_.tournament_id) if round_.tournament_id else None,
        "round_date": round_.date,
        "tee": round_.tee,
        "total_score": round_.total_score,
        "total_par": round_.total_par,
        "weather": round_.weather.model_dump_json() if round_.weather else None,
        "notes": round_.notes,
        "status": round_.status.value,
        "confirmed_by": to_uuid(round_.confirmed_by) if round_.confirmed_by else None,
        "confirmed_at": round_.confirmed_at,
    }


def tournament_to_row(tournament: Tournament) -> dict:
    """Tournament -> dict for tournaments.tournaments INSERT/UPDATE."""
    return {
        "name": tournament.name,
        "description": tournament.description,
        "course_id": to_uuid(tournament.course_id),
        "organizer_id": to_uuid(tournament.organizer_id),
        "start_date": tournament.start_date,
        "end_date": tournament.end_date,
        "format": tournament.format.value,
        "max_participants": tournament.max_participants,
        "entry_fee": tournament.entry_fee,
        "prizes": tournament.prizes.model_dump_json(),
        "status": tournament.status.value,
    }


def leaderboard_to_rows(entries: List[LeaderboardEntry], tournament_id: UUID) -> List[tuple]:
    """Leaderboard -> tuples for tournaments.leaderboard_entries, position = list index."""
    return [
        (tournament_id, to_uuid(e.user_id), e.total_score, position,
         [to_uuid(r) for r in e.round_ids])
        for position, e in enumerate(entries)
    ]
