"""Tournament leaderboard maintenance.

A leaderboard holds at most one entry per user and is kept sorted ascending by
total score (lower is better). Ties keep their previous relative order.
"""

from enum import Enum
from typing import List, Optional

from models import LeaderboardEntry, TournamentWinners


class LeaderboardMode(str, Enum):
    CREATE = "create"   # a new round: best score wins
    UPDATE = "update"   # an edited round: new score replaces the old one


def apply_round_score(
    entries: List[LeaderboardEntry],
    user_id: str,
    total_score: int,
    mode: LeaderboardMode,
    round_id: Optional[str] = None,
) -> List[LeaderboardEntry]:
    """Return a new, sorted leaderboard with the user's score applied.

    CREATE only lowers an existing entry; UPDATE overwrites it unconditionally.
    A user without an entry is always inserted. ``round_id`` is recorded on the
    entry whenever the score is applied.
    """
    board = [entry.model_copy(deep=True) for entry in entries]
    entry = next((e for e in board if e.user_id == user_id), None)

    if entry is None:
        entry = LeaderboardEntry(user_id=user_id, total_score=total_score)
        board.append(entry)
        applied = True
    elif mode is LeaderboardMode.UPDATE or total_score < entry.total_score:
        entry.total_score = total_score
        applied = True
    else:
        applied = False

    if applied and round_id and round_id not in entry.round_ids:
        entry.round_ids = entry.round_ids + [round_id]

    # list.sort is stable, so equal scores keep insertion order.
    board.sort(key=lambda e: e.total_score)
    return board


def top_three(entries: List[LeaderboardEntry]) -> TournamentWinners:
    """Project the first three positions; does not modify the leaderboard."""
    ranked = sorted(entries, key=lambda e: e.total_score)
    slots = ranked[:3] + [None] * (3 - min(len(ranked), 3))
    return TournamentWinners(first=slots[0], second=slots[1], third=slots[2])
