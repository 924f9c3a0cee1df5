from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from .base import BaseGolfModel


class TournamentStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


class TournamentFormat(str, Enum):
    STROKE_PLAY = "stroke-play"
    MATCH_PLAY = "match-play"
    SCRAMBLE = "scramble"


class Prizes(BaseModel):
    first: Optional[str] = None
    second: Optional[str] = None
    third: Optional[str] = None
    best_dressed: Optional[str] = None


class Participant(BaseModel):
    """A user's registration for a tournament."""
    user_id: str
    registration_date: datetime
    paid: bool = False


class LeaderboardEntry(BaseGolfModel):
    """One player's standing: their counted total and the rounds that produced it."""
    user_id: str
    total_score: int
    round_ids: List[str] = Field(default_factory=list)
    player_name: Optional[str] = None


class TournamentWinners(BaseModel):
    """Top three leaderboard positions at close. Slots are None when unfilled."""
    first: Optional[LeaderboardEntry] = None
    second: Optional[LeaderboardEntry] = None
    third: Optional[LeaderboardEntry] = None


class TournamentDetails(BaseModel):
    """Admin-editable fields of a tournament."""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    course_id: str = Field(..., min_length=1)
    start_date: datetime
    end_date: datetime
    format: TournamentFormat
    max_participants: int = Field(..., ge=1)
    entry_fee: float = Field(0, ge=0)
    prizes: Prizes = Field(default_factory=Prizes)


class Tournament(TournamentDetails, BaseGolfModel):
    """A club tournament with its participants and leaderboard."""
    id: Optional[str] = None
    organizer_id: str
    participants: List[Participant] = Field(default_factory=list)
    leaderboard: List[LeaderboardEntry] = Field(default_factory=list)
    status: TournamentStatus = TournamentStatus.UPCOMING
    created_at: Optional[datetime] = None

    # Projected by the repository join.
    course_name: Optional[str] = None
    organizer_name: Optional[str] = None

    @field_validator('leaderboard')
    @classmethod
    def validate_unique_entries(cls, v):
        user_ids = [entry.user_id for entry in v]
        if len(user_ids) != len(set(user_ids)):
            raise ValueError("Leaderboard can hold only one entry per user")
        return v

    def is_registered(self, user_id: str) -> bool:
        return any(p.user_id == user_id for p in self.participants)

    def is_full(self) -> bool:
        return len(self.participants) >= self.max_participants

    def get_entry(self, user_id: str) -> Optional[LeaderboardEntry]:
        for entry in self.leaderboard:
            if entry.user_id == user_id:
                return entry
        return None
