from datetime import datetime
from pydantic import BaseModel, Field
from typing import Literal, Optional

from .base import BaseGolfModel


class PlayerStats(BaseModel):
    """Running totals maintained as rounds are recorded."""
    total_rounds: int = Field(0, ge=0)
    average_score: int = Field(0, ge=0)
    best_round: Optional[int] = None
    total_birdies: int = Field(0, ge=0)
    total_eagles: int = Field(0, ge=0)


class Preferences(BaseModel):
    units: Literal["metric", "imperial"] = "imperial"
    notifications: bool = True


class User(BaseGolfModel):
    """Represents a golfer (or club administrator)."""
    id: Optional[str] = None
    email: str
    name: str
    password_hash: Optional[str] = Field(None, exclude=True)
    handicap: float = Field(0, ge=-10, le=54)
    role: Literal["user", "admin"] = "user"
    status: Literal["active", "inactive", "banned"] = "active"
    stats: PlayerStats = Field(default_factory=PlayerStats)
    preferences: Preferences = Field(default_factory=Preferences)
    created_at: Optional[datetime] = None
