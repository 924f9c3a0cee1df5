from pydantic import Field, computed_field
from typing import Optional

from .base import BaseGolfModel


class HoleScore(BaseGolfModel):
    """Represents a player's score on a single hole."""
    hole_number: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=6)
    strokes: int = Field(..., ge=1, le=20)
    putts: Optional[int] = Field(None, ge=0, le=10)
    club: Optional[str] = None

    @computed_field
    @property
    def strokes_over_par(self) -> int:
        """Score relative to par (+2, -1, etc.)."""
        return self.strokes - self.par

    def get_score_type(self) -> str:
        """Get the golf term for this score (Eagle, Birdie, Par, Bogey, etc.)."""
        relative = self.strokes_over_par
        if relative <= -4:
            return "Condor"
        if relative >= 4:
            return f"{relative} Over Par"

        score_names = {
            -3: "Albatross",
            -2: "Eagle",
            -1: "Birdie",
            0: "Par",
            1: "Bogey",
            2: "Double Bogey",
            3: "Triple Bogey",
        }
        return score_names[relative]

    def is_birdie(self) -> bool:
        return self.strokes_over_par == -1

    def is_eagle_or_better(self) -> bool:
        return self.strokes_over_par <= -2
