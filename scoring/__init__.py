"""Domain rules for round scoring, review and tournament standings.

Everything except ``workflow`` and ``side_effects`` is pure: functions take
models and return new models or raise a ``ScoringError``.
"""

from scoring.exceptions import ConflictError, ForbiddenError, InvalidRequestError, ScoringError
from scoring.leaderboard import LeaderboardMode, apply_round_score, top_three
from scoring.permissions import is_admin
from scoring.player_stats import record_round

__all__ = [
    "ConflictError",
    "ForbiddenError",
    "InvalidRequestError",
    "LeaderboardMode",
    "ScoringError",
    "apply_round_score",
    "is_admin",
    "record_round",
    "top_three",
]
