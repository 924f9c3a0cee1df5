from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, computed_field, field_validator
from typing import List, Literal, Optional

from .base import BaseGolfModel
from .hole_score import HoleScore


TeeColor = Literal["black", "blue", "white", "red"]


class RoundStatus(str, Enum):
    """Review state of a submitted round."""
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class Weather(BaseModel):
    temperature: Optional[float] = None
    conditions: Optional[str] = None
    wind_speed: Optional[float] = Field(None, ge=0)


class Round(BaseGolfModel):
    """Represents a round of golf played by a user."""
    id: Optional[str] = None
    user_id: str
    course_id: str
    tournament_id: Optional[str] = None
    date: datetime
    tee: TeeColor = "white"
    hole_scores: List[HoleScore] = Field(default_factory=list)
    weather: Optional[Weather] = None
    notes: Optional[str] = None
    status: RoundStatus = RoundStatus.SUBMITTED
    confirmed_by: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    # Display names projected by the repository join; never written back.
    course_name: Optional[str] = None
    tournament_name: Optional[str] = None
    player_name: Optional[str] = None

    @field_validator('hole_scores')
    @classmethod
    def validate_hole_scores(cls, v):
        numbers = [hs.hole_number for hs in v]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Each hole can only be scored once per round")
        return sorted(v, key=lambda hs: hs.hole_number)

    @computed_field
    @property
    def total_score(self) -> int:
        """Total strokes for the round."""
        return sum(hs.strokes for hs in self.hole_scores)

    @computed_field
    @property
    def total_par(self) -> int:
        """Par summed over the scored holes."""
        return sum(hs.par for hs in self.hole_scores)

    def total_to_par(self) -> int:
        return self.total_score - self.total_par

    def get_hole_score(self, hole_number: int) -> Optional[HoleScore]:
        """Get score for a specific hole."""
        for hs in self.hole_scores:
            if hs.hole_number == hole_number:
                return hs
        return None

    def count_birdies(self) -> int:
        return sum(1 for hs in self.hole_scores if hs.is_birdie())

    def count_eagles(self) -> int:
        """Eagles or better (albatross, condor)."""
        return sum(1 for hs in self.hole_scores if hs.is_eagle_or_better())

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
