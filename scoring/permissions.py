"""Authorization predicates shared by every route."""

from typing import Optional

from models import Round, User


def is_admin(user: Optional[User], fallback_admin_email: Optional[str] = None) -> bool:
    """Admin by role, or by matching the configured fallback administrator email.

    The email comparison is deliberately case-insensitive.
    """
    if user is None:
        return False
    if user.role == "admin":
        return True
    return bool(fallback_admin_email) and user.email.lower() == fallback_admin_email.lower()


def can_access_round(user: User, round_: Round, fallback_admin_email: Optional[str] = None) -> bool:
    """Owners and administrators may read or edit a round."""
    return round_.is_owned_by(user.id) or is_admin(user, fallback_admin_email)
