"""API-specific request and response models."""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from models import (
    Location,
    Preferences,
    Round,
    RoundStatus,
    TournamentFormat,
    TournamentStatus,
    TournamentWinners,
)
from scoring.review import ReviewAction


class MessageResponse(BaseModel):
    success: bool = True
    message: str


# ================================================================
# Users
# ================================================================

class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    handicap: Optional[float] = Field(None, ge=-10, le=54)
    preferences: Optional[Preferences] = None


# ================================================================
# Courses
# ================================================================

class HoleInput(BaseModel):
    # Ranges are checked against the Hole model so the caller gets one clear message.
    number: int
    par: int
    handicap: Optional[int] = None
    yardage: dict = {}


class CreateCourseRequest(BaseModel):
    name: str = Field(..., min_length=1)
    location: Location = Location()
    holes: List[HoleInput] = []
    slope_rating: Optional[float] = None
    course_rating: Optional[float] = None


class UpdateHolesRequest(BaseModel):
    holes: List[HoleInput]


class CourseSummaryResponse(BaseModel):
    """Course for card/list views."""
    id: str
    name: str
    city: Optional[str] = None
    state: Optional[str] = None
    par: Optional[int] = None
    total_holes: int = 0


# ================================================================
# Rounds
# ================================================================

class RoundSummaryResponse(BaseModel):
    """Lightweight round for list views."""
    id: str
    player_name: Optional[str] = None
    course_name: Optional[str] = None
    tournament_name: Optional[str] = None
    date: datetime
    tee: str
    total_score: int
    total_par: int
    to_par: int
    status: RoundStatus


class SideEffectResponse(BaseModel):
    name: str
    ok: bool
    error: Optional[str] = None


class RoundWriteResponse(BaseModel):
    """A created or edited round with the outcome of its follow-up updates."""
    round: Round
    side_effects: List[SideEffectResponse] = []


class ReviewRequest(BaseModel):
    action: ReviewAction


class ReviewResponse(BaseModel):
    id: str
    status: RoundStatus
    confirmed_by: Optional[str] = None
    confirmed_at: Optional[datetime] = None


# ================================================================
# Tournaments
# ================================================================

class TournamentSummaryResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    course_name: Optional[str] = None
    organizer_name: Optional[str] = None
    start_date: datetime
    end_date: datetime
    format: TournamentFormat
    max_participants: int
    participant_count: int
    entry_fee: float
    status: TournamentStatus


class CloseTournamentResponse(BaseModel):
    success: bool = True
    message: str = "Tournament closed successfully"
    id: str
    name: str
    status: TournamentStatus
    winners: TournamentWinners
