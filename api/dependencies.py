from fastapi import Depends, Header, HTTPException, Request
from typing import Optional

from api.config import Settings, load_settings
from database.db_manager import DatabaseManager
from database.exceptions import NotFoundError
from models import User
from scoring.permissions import is_admin
from scoring.workflow import RoundWorkflow


def get_db(request: Request) -> DatabaseManager:
    """FastAPI dependency that provides the DatabaseManager."""
    return request.app.state.db_manager


def get_settings() -> Settings:
    return load_settings()


def get_workflow(
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RoundWorkflow:
    return RoundWorkflow(db, fallback_admin_email=settings.fallback_admin_email)


async def get_current_user(
    x_user_id: Optional[str] = Header(None),
    db: DatabaseManager = Depends(get_db),
) -> User:
    """Resolve the caller from the id forwarded by the authenticating gateway."""
    if not x_user_id:
        raise HTTPException(401, "Unauthorized")
    try:
        user = await db.users.get_user(x_user_id)
    except NotFoundError:
        user = None
    if user is None:
        raise HTTPException(401, "Unauthorized")
    return user


async def require_admin(
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> User:
    if not is_admin(user, settings.fallback_admin_email):
        raise HTTPException(403, "Admin access required")
    return user
