"""Round scoring workflow.

Each operation performs its primary write first; failures there propagate to the
caller. Statistics and leaderboard updates follow as best-effort side effects
whose outcomes are logged and returned but never raised.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from uuid import UUID

from database.db_manager import DatabaseManager
from database.exceptions import NotFoundError
from models import Course, HoleScore, Round, TeeColor, User, Weather
from scoring.exceptions import ForbiddenError, InvalidRequestError
from scoring.leaderboard import LeaderboardMode
from scoring.permissions import can_access_round, is_admin
from scoring.review import ReviewAction, apply_edit, ensure_can_edit, review
from scoring.side_effects import SideEffectOutcome, attempt

logger = logging.getLogger(__name__)


class HoleScoreInput(BaseModel):
    hole_number: int = Field(..., ge=1, le=18)
    strokes: int = Field(..., ge=1, le=20)
    par: Optional[int] = Field(None, ge=3, le=6)  # taken from the course when omitted
    putts: Optional[int] = Field(None, ge=0, le=10)
    club: Optional[str] = None


class RoundSubmission(BaseModel):
    course_id: str
    tournament_id: Optional[UUID] = None  # stored even when no such tournament exists
    date: datetime
    tee: TeeColor = "white"
    hole_scores: List[HoleScoreInput] = Field(..., min_length=1)
    total_score: Optional[int] = None
    total_par: Optional[int] = None
    weather: Optional[Weather] = None
    notes: Optional[str] = None


class RoundChanges(BaseModel):
    """Partial round edit; hole scores are upserted by hole number."""
    date: Optional[datetime] = None
    tee: Optional[TeeColor] = None
    hole_scores: Optional[List[HoleScoreInput]] = None
    weather: Optional[Weather] = None
    notes: Optional[str] = None


@dataclass
class RoundResult:
    round: Round
    side_effects: List[SideEffectOutcome] = field(default_factory=list)


def resolve_hole_scores(inputs: List[HoleScoreInput], course: Optional[Course]) -> List[HoleScore]:
    """Turn submitted hole scores into HoleScores, filling par from the course."""
    resolved = []
    for hs in inputs:
        par = hs.par
        if par is None and course is not None:
            hole = course.get_hole(hs.hole_number)
            par = hole.par if hole else None
        if par is None:
            raise InvalidRequestError(f"No par available for hole {hs.hole_number}")
        resolved.append(HoleScore(
            hole_number=hs.hole_number,
            par=par,
            strokes=hs.strokes,
            putts=hs.putts,
            club=hs.club,
        ))
    return resolved


def merge_hole_scores(existing: List[HoleScore], updates: List[HoleScore]) -> List[HoleScore]:
    by_number: Dict[int, HoleScore] = {hs.hole_number: hs for hs in existing}
    for hs in updates:
        by_number[hs.hole_number] = hs
    return [by_number[n] for n in sorted(by_number)]


class RoundWorkflow:
    """Coordinates round persistence with its statistics and leaderboard effects."""

    def __init__(self, db: DatabaseManager, fallback_admin_email: Optional[str] = None):
        self._db = db
        self._fallback_admin_email = fallback_admin_email

    def _is_admin(self, user: User) -> bool:
        return is_admin(user, self._fallback_admin_email)

    async def _load_round(self, round_id: str) -> Round:
        round_ = await self._db.rounds.get_round(round_id)
        if round_ is None:
            raise NotFoundError("Round not found")
        return round_

    async def _update_leaderboard(self, round_: Round, mode: LeaderboardMode) -> SideEffectOutcome:
        return await attempt(
            "leaderboard",
            self._db.tournaments.record_score(
                round_.tournament_id,
                round_.user_id,
                round_.total_score,
                mode,
                round_id=round_.id,
            ),
            tournament_id=round_.tournament_id,
            user_id=round_.user_id,
        )

    # ================================================================
    # Submit
    # ================================================================

    async def submit_round(self, user: User, submission: RoundSubmission) -> RoundResult:
        """Record a new round for ``user`` and update stats and standings."""
        course = await self._db.courses.get_course(submission.course_id)
        if course is None:
            raise NotFoundError("Course not found")

        try:
            round_ = Round(
                user_id=user.id,
                course_id=submission.course_id,
                tournament_id=str(submission.tournament_id) if submission.tournament_id else None,
                date=submission.date,
                tee=submission.tee,
                hole_scores=resolve_hole_scores(submission.hole_scores, course),
                weather=submission.weather,
                notes=submission.notes,
            )
        except ValueError as e:
            # pydantic.ValidationError is a ValueError
            raise InvalidRequestError(f"Invalid round data - {e}") from e

        if submission.total_score is not None and submission.total_score != round_.total_score:
            raise InvalidRequestError(
                f"Total score {submission.total_score} does not match hole scores ({round_.total_score})"
            )
        if submission.total_par is not None and submission.total_par != round_.total_par:
            raise InvalidRequestError(
                f"Total par {submission.total_par} does not match hole pars ({round_.total_par})"
            )

        saved = await self._db.rounds.create_round(round_)
        logger.info("Round %s created for user %s (score %s)", saved.id, user.id, saved.total_score)

        outcomes = [
            await attempt(
                "player_stats",
                self._db.users.record_round_stats(user.id, saved),
                user_id=user.id,
            )
        ]
        if saved.tournament_id:
            outcomes.append(await self._update_leaderboard(saved, LeaderboardMode.CREATE))
        return RoundResult(round=saved, side_effects=outcomes)

    # ================================================================
    # Read
    # ================================================================

    async def get_round(self, user: User, round_id: str) -> Round:
        round_ = await self._load_round(round_id)
        if not can_access_round(user, round_, self._fallback_admin_email):
            raise ForbiddenError("Access denied")
        return round_

    async def list_rounds(
        self,
        user: User,
        *,
        status: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Round]:
        """Admins filtering by status see everyone's rounds; otherwise only the caller's."""
        if status and self._is_admin(user):
            return await self._db.rounds.list_rounds_by_status(status, limit=limit, offset=offset)
        return await self._db.rounds.list_rounds_for_user(user.id, limit=limit, offset=offset)

    # ================================================================
    # Edit / review
    # ================================================================

    async def update_round(self, user: User, round_id: str, changes: RoundChanges) -> RoundResult:
        """Apply an owner or admin edit, then refresh the tournament standing."""
        current = await self._load_round(round_id)
        admin = self._is_admin(user)
        ensure_can_edit(current, user.id, admin)

        # Fields sent as null are cleared; fields not sent are left alone.
        fields = changes.model_dump(exclude_unset=True, exclude={"hole_scores"})
        if changes.hole_scores:
            course = await self._db.courses.get_course(current.course_id)
            incoming = resolve_hole_scores(changes.hole_scores, course)
            fields["hole_scores"] = merge_hole_scores(current.hole_scores, incoming)

        edited = apply_edit(current, fields, editor_id=user.id, editor_is_admin=admin)
        saved = await self._db.rounds.save_round(edited)
        logger.info("Round %s updated by %s (status %s)", saved.id, user.id, saved.status.value)

        outcomes = []
        if saved.tournament_id:
            outcomes.append(await self._update_leaderboard(saved, LeaderboardMode.UPDATE))
        return RoundResult(round=saved, side_effects=outcomes)

    async def review_round(self, reviewer: User, round_id: str, action: ReviewAction) -> Round:
        """Confirm or reject a round. Callers must already have checked admin rights."""
        if not self._is_admin(reviewer):
            raise ForbiddenError("Admin access required")
        current = await self._load_round(round_id)
        reviewed = review(current, action, reviewer.id)
        saved = await self._db.rounds.save_review(reviewed)
        logger.info("Round %s %s by %s", saved.id, saved.status.value, reviewer.id)
        return saved
