from database.connection import DatabasePool, db
from database.db_manager import DatabaseManager
from database.repositories import (
    CourseRepositoryDB,
    RoundRepositoryDB,
    TournamentRepositoryDB,
    UserRepositoryDB,
)
from database.exceptions import DatabaseError, NotFoundError, DuplicateError, IntegrityError

__all__ = [
    "DatabasePool",
    "db",
    "DatabaseManager",
    "CourseRepositoryDB",
    "UserRepositoryDB",
    "RoundRepositoryDB",
    "TournamentRepositoryDB",
    "DatabaseError",
    "NotFoundError",
    "DuplicateError",
    "IntegrityError",
]
