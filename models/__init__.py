from .base import BaseGolfModel
from .course import Course, Location
from .hole import Hole, TEE_COLORS
from .hole_score import HoleScore
from .round import Round, RoundStatus, TeeColor, Weather
from .tournament import (
    LeaderboardEntry,
    Participant,
    Prizes,
    Tournament,
    TournamentDetails,
    TournamentFormat,
    TournamentStatus,
    TournamentWinners,
)
from .user import PlayerStats, Preferences, User

__all__ = [
    "BaseGolfModel",
    "Course",
    "Hole",
    "HoleScore",
    "LeaderboardEntry",
    "Location",
    "Participant",
    "PlayerStats",
    "Preferences",
    "Prizes",
    "Round",
    "RoundStatus",
    "TEE_COLORS",
    "TeeColor",
    "Tournament",
    "TournamentDetails",
    "TournamentFormat",
    "TournamentStatus",
    "TournamentWinners",
    "User",
    "Weather",
]
