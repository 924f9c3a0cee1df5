"""CRUD operations for the courses schema (courses, holes)."""

import asyncpg
import logging
from typing import List, Optional

from models import Course, Hole
from database.converters import course_from_rows, course_to_row, hole_to_row, to_uuid
from database.exceptions import DuplicateError, IntegrityError, NotFoundError

logger = logging.getLogger(__name__)


class CourseRepositoryDB:
    """Async CRUD for courses and their holes."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def _assemble(self, conn, course_row) -> Course:
        """Build a full Course model from a course row + its holes."""
        hole_rows = await conn.fetch(
            "SELECT * FROM courses.holes WHERE course_id = $1 ORDER BY hole_number",
            course_row["id"],
        )
        return course_from_rows(course_row, hole_rows)

    # ================================================================
    # Read
    # ================================================================

    async def get_course(self, course_id: str) -> Optional[Course]:
        """Get a fully-populated Course by ID."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM courses.courses WHERE id = $1",
                to_uuid(course_id),
            )
            if not row:
                return None
            return await self._assemble(conn, row)

    async def list_courses(self, *, limit: int = 50, offset: int = 0) -> List[Course]:
        """List courses ordered by name (fully populated)."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM courses.courses ORDER BY name LIMIT $1 OFFSET $2",
                limit, offset,
            )
            return [await self._assemble(conn, r) for r in rows]

    # ================================================================
    # Create / update
    # ================================================================

    async def create_course(self, course: Course) -> Course:
        """Insert a Course with its holes in one transaction."""
        data = course_to_row(course)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    course_row = await conn.fetchrow(
                        """INSERT INTO courses.courses
                           (name, address, city, state, country, slope_rating, course_rating)
                           VALUES ($1, $2, $3, $4, $5, $6, $7) RETURNING *""",
                        data["name"], data["address"], data["city"], data["state"],
                        data["country"], data["slope_rating"], data["course_rating"],
                    )
                    if course.holes:
                        await conn.executemany(
                            """INSERT INTO courses.holes
                               (course_id, hole_number, par, handicap, yardages)
                               VALUES ($1, $2, $3, $4, $5::jsonb)""",
                            [hole_to_row(h, course_row["id"]) for h in course.holes],
                        )
                    return await self._assemble(conn, course_row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Course already exists: {e}") from e

    async def update_holes(self, course_id: str, holes: List[Hole]) -> Course:
        """Replace a course's hole list (admin par edits).

        Holes arrive as validated Hole models, so an out-of-range par never
        reaches the database.
        """
        cid = to_uuid(course_id)
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                course_row = await conn.fetchrow(
                    "SELECT * FROM courses.courses WHERE id = $1 FOR UPDATE", cid
                )
                if not course_row:
                    raise NotFoundError(f"Course {course_id} not found")

                await conn.execute("DELETE FROM courses.holes WHERE course_id = $1", cid)
                if holes:
                    await conn.executemany(
                        """INSERT INTO courses.holes
                           (course_id, hole_number, par, handicap, yardages)
                           VALUES ($1, $2, $3, $4, $5::jsonb)""",
                        [hole_to_row(h, cid) for h in holes],
                    )
                return await self._assemble(conn, course_row)

    # ================================================================
    # Delete
    # ================================================================

    async def count_tournaments_using(self, course_id: str) -> int:
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT COUNT(*) FROM tournaments.tournaments WHERE course_id = $1",
                to_uuid(course_id),
            )

    async def delete_course(self, course_id: str) -> bool:
        """Delete a course that no tournament references. Returns True if deleted."""
        in_use = await self.count_tournaments_using(course_id)
        if in_use:
            raise IntegrityError(
                f"Cannot delete course - it is being used in {in_use} tournament(s)"
            )
        try:
            async with self._pool.acquire() as conn:
                result = await conn.execute(
                    "DELETE FROM courses.courses WHERE id = $1", to_uuid(course_id)
                )
        except asyncpg.ForeignKeyViolationError as e:
            # A tournament or round was attached between the count and the delete
            raise IntegrityError(f"Cannot delete course - it is still referenced: {e}") from e
        deleted = result == "DELETE 1"
        if deleted:
            logger.info("Course %s deleted", course_id)
        return deleted
