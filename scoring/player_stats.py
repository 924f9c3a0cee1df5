"""Running player statistics, updated once per recorded round."""

import math

from models import PlayerStats, Round


def round_half_up(value: float) -> int:
    """Round .5 upward, matching how stored averages were always produced.

    The builtin ``round`` rounds half to even, which would drift from existing data.
    """
    return math.floor(value + 0.5)


def record_round(stats: PlayerStats, round_: Round) -> PlayerStats:
    """Fold a newly created round into a player's running totals.

    The average is recomputed incrementally from the previous (already rounded)
    average and count, so after many rounds it can differ slightly from the true
    mean of every score. Stored values depend on this; keep it incremental.
    """
    score = round_.total_score
    count = stats.total_rounds + 1
    average = round_half_up((stats.average_score * stats.total_rounds + score) / count)

    best = stats.best_round
    if best is None or score < best:
        best = score

    return stats.model_copy(update={
        "total_rounds": count,
        "average_score": average,
        "best_round": best,
        "total_birdies": stats.total_birdies + round_.count_birdies(),
        "total_eagles": stats.total_eagles + round_.count_eagles(),
    })
