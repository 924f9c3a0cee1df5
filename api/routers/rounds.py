"""Round API endpoints: scoring, editing and admin review."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from api.dependencies import get_current_user, get_workflow, require_admin
from api.errors import DOMAIN_ERRORS, http_error
from api.schemas import (
    ReviewRequest,
    ReviewResponse,
    RoundSummaryResponse,
    RoundWriteResponse,
    SideEffectResponse,
)
from models import Round, RoundStatus, User
from scoring.workflow import RoundChanges, RoundResult, RoundSubmission, RoundWorkflow

logger = logging.getLogger(__name__)

router = APIRouter()


def summarize_round(r: Round) -> RoundSummaryResponse:
    """Project a full Round model into a lightweight summary."""
    return RoundSummaryResponse(
        id=r.id,
        player_name=r.player_name,
        course_name=r.course_name,
        tournament_name=r.tournament_name,
        date=r.date,
        tee=r.tee,
        total_score=r.total_score,
        total_par=r.total_par,
        to_par=r.total_to_par(),
        status=r.status,
    )


def _write_response(result: RoundResult) -> RoundWriteResponse:
    return RoundWriteResponse(
        round=result.round,
        side_effects=[
            SideEffectResponse(name=o.name, ok=o.ok, error=o.error)
            for o in result.side_effects
        ],
    )


@router.get("", response_model=List[RoundSummaryResponse])
async def list_rounds(
    status: Optional[RoundStatus] = Query(None, description="Admins only: review queue filter"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    workflow: RoundWorkflow = Depends(get_workflow),
):
    rounds = await workflow.list_rounds(
        user, status=status.value if status else None, limit=limit, offset=offset
    )
    return [summarize_round(r) for r in rounds]


@router.post("", response_model=RoundWriteResponse, status_code=201)
async def create_round(
    req: RoundSubmission,
    user: User = Depends(get_current_user),
    workflow: RoundWorkflow = Depends(get_workflow),
):
    """Submit a scored round; stats and tournament standings follow best-effort."""
    try:
        result = await workflow.submit_round(user, req)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Course not found")
    except Exception:
        logger.exception("Error creating round for user %s", user.id)
        raise HTTPException(500, "Internal server error")
    return _write_response(result)


@router.get("/{round_id}", response_model=Round)
async def get_round(
    round_id: str,
    user: User = Depends(get_current_user),
    workflow: RoundWorkflow = Depends(get_workflow),
):
    try:
        return await workflow.get_round(user, round_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Round not found")


@router.put("/{round_id}", response_model=RoundWriteResponse)
async def update_round(
    round_id: str,
    req: RoundChanges,
    user: User = Depends(get_current_user),
    workflow: RoundWorkflow = Depends(get_workflow),
):
    """Edit a round. Owners cannot edit confirmed rounds; admins keep review state."""
    try:
        result = await workflow.update_round(user, round_id, req)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Round not found")
    except Exception:
        logger.exception("Error updating round %s", round_id)
        raise HTTPException(500, "Failed to update round")
    return _write_response(result)


@router.post("/{round_id}/confirm", response_model=ReviewResponse)
async def review_round(
    round_id: str,
    req: ReviewRequest,
    admin: User = Depends(require_admin),
    workflow: RoundWorkflow = Depends(get_workflow),
):
    """Confirm or reject a submitted round."""
    try:
        reviewed = await workflow.review_round(admin, round_id, req.action)
    except DOMAIN_ERRORS as e:
        raise http_error(e, not_found="Round not found")
    return ReviewResponse(
        id=reviewed.id,
        status=reviewed.status,
        confirmed_by=reviewed.confirmed_by,
        confirmed_at=reviewed.confirmed_at,
    )
