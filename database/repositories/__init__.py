from .course_repo import CourseRepositoryDB
from .user_repo import UserRepositoryDB
from .round_repo import RoundRepositoryDB
from .tournament_repo import TournamentRepositoryDB

__all__ = ["CourseRepositoryDB", "UserRepositoryDB", "RoundRepositoryDB", "TournamentRepositoryDB"]
