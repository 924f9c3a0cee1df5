"""Course API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from typing import List
from database.db_manager import DatabaseManager
from database.exceptions import DuplicateError, IntegrityError, NotFoundError
from api.dependencies import get_current_user, get_db, require_admin
from api.schemas import (
    CourseSummaryResponse,
    CreateCourseRequest,
    HoleInput,
    MessageResponse,
    UpdateHolesRequest,
)
from models import Course, Hole, User

router = APIRouter()


def _summarize_course(c: Course) -> CourseSummaryResponse:
    return CourseSummaryResponse(
        id=c.id,
        name=c.name,
        city=c.location.city,
        state=c.location.state,
        par=c.get_par(),
        total_holes=len(c.holes),
    )


def _build_holes(holes: List[HoleInput]) -> List[Hole]:
    """Validate submitted holes; any bad number or par rejects the whole list."""
    try:
        return [
            Hole(number=h.number, par=h.par, handicap=h.handicap, yardage=h.yardage)
            for h in holes
        ]
    except ValidationError as e:
        error = e.errors()[0]
        if error["loc"] and error["loc"][0] == "par":
            raise HTTPException(400, "Invalid hole data - par must be between 3 and 6")
        raise HTTPException(400, f"Invalid hole data - {error['msg']}")


@router.get("", response_model=List[CourseSummaryResponse])
async def list_courses(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: DatabaseManager = Depends(get_db),
):
    courses = await db.courses.list_courses(limit=limit, offset=offset)
    return [_summarize_course(c) for c in courses]


@router.get("/{course_id}", response_model=Course)
async def get_course(course_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        course = await db.courses.get_course(course_id)
    except NotFoundError:
        course = None
    if not course:
        raise HTTPException(404, "Course not found")
    return course


@router.post("", response_model=Course, status_code=201)
async def create_course(
    req: CreateCourseRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    try:
        course = Course(
            name=req.name,
            location=req.location,
            holes=_build_holes(req.holes),
            slope_rating=req.slope_rating,
            course_rating=req.course_rating,
        )
    except ValidationError as e:
        raise HTTPException(400, f"Invalid course data - {e.errors()[0]['msg']}")
    try:
        return await db.courses.create_course(course)
    except DuplicateError:
        raise HTTPException(409, "A course with that name already exists")


@router.put("/{course_id}/holes", response_model=Course)
async def update_course_holes(
    course_id: str,
    req: UpdateHolesRequest,
    admin: User = Depends(require_admin),
    db: DatabaseManager = Depends(get_db),
):
    """Admin edit of a course's hole list (pars, handicaps, yardages)."""
    holes = _build_holes(req.holes)
    if len({h.number for h in holes}) != len(holes):
        raise HTTPException(400, "Invalid hole data - hole numbers must be unique")
    try:
        return await db.courses.update_holes(course_id, holes)
    except NotFoundError:
        raise HTTPException(404, "Course not found")


@router.delete("/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: str,
    admin: User = Depends(require_admin),
    db: DatabaseManager = Depends(get_db),
):
    try:
        deleted = await db.courses.delete_course(course_id)
    except IntegrityError as e:
        raise HTTPException(409, str(e))
    except NotFoundError:
        deleted = False
    if not deleted:
        raise HTTPException(404, "Course not found")
    return MessageResponse(message="Course deleted successfully")
