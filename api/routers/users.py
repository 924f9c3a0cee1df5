"""User profile endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from database.db_manager import DatabaseManager
from database.exceptions import NotFoundError
from api.dependencies import get_current_user, get_db
from api.schemas import UpdateProfileRequest
from models import User

router = APIRouter()


@router.get("/me", response_model=User)
async def get_profile(user: User = Depends(get_current_user)):
    """The caller's profile, including running stats."""
    return user


@router.put("/me", response_model=User)
async def update_profile(
    req: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    updates = req.model_dump(exclude_none=True)
    try:
        return await db.users.update_profile(user.id, **updates)
    except NotFoundError:
        raise HTTPException(404, "User not found")
