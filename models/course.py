from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from .base import BaseGolfModel
from .hole import Hole


class Location(BaseModel):
    """Postal location of a course."""
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class Course(BaseGolfModel):
    """Golf course with its ordered holes."""
    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    location: Location = Field(default_factory=Location)
    holes: List[Hole] = Field(default_factory=list)
    slope_rating: Optional[float] = Field(None, ge=55, le=155)
    course_rating: Optional[float] = Field(None, ge=55.0, le=85.0)
    created_at: Optional[datetime] = None

    @field_validator('holes')
    @classmethod
    def validate_unique_hole_numbers(cls, v):
        numbers = [h.number for h in v]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Hole numbers must be unique within a course")
        return sorted(v, key=lambda h: h.number)

    def get_hole(self, number: int) -> Optional[Hole]:
        """Get a hole by its number."""
        for hole in self.holes:
            if hole.number == number:
                return hole
        return None

    def get_par(self) -> Optional[int]:
        """Total par across all holes, None for a course without holes."""
        if not self.holes:
            return None
        return sum(h.par for h in self.holes)

    @property
    def front_nine_par(self) -> Optional[int]:
        """Calculate par for holes 1-9."""
        front = [h.par for h in self.holes if h.number <= 9]
        return sum(front) if front else None

    @property
    def back_nine_par(self) -> Optional[int]:
        """Calculate par for holes 10-18."""
        back = [h.par for h in self.holes if h.number >= 10]
        return sum(back) if back else None
