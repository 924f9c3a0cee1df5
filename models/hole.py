from pydantic import Field, field_validator
from typing import Dict, Optional

from .base import BaseGolfModel

TEE_COLORS = ("black", "blue", "white", "red")


class Hole(BaseGolfModel):
    """Represents a single hole on a golf course."""
    number: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=6)
    handicap: Optional[int] = Field(None, ge=1, le=18)
    yardage: Dict[str, int] = Field(default_factory=dict)  # {"white": 385, "blue": 410}

    @field_validator('yardage')
    @classmethod
    def validate_yardage(cls, v):
        for color, yards in v.items():
            if color not in TEE_COLORS:
                raise ValueError(f"Unknown tee color '{color}'")
            if yards < 0:
                raise ValueError(f"Yardage for {color} tee cannot be negative")
        return v

    def get_yardage(self, tee: str) -> Optional[int]:
        """Get yardage from a specific tee color."""
        return self.yardage.get(tee.lower())
