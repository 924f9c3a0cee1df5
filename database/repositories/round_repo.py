"""CRUD operations for rounds and hole_scores."""

import asyncpg
from typing import List, Optional

from models import Round
from database.converters import hole_score_to_row, round_from_rows, round_to_row, to_uuid
from database.exceptions import IntegrityError, NotFoundError

# Round row plus the display names the API shows alongside it.
_ROUND_SELECT = """
    SELECT r.*, c.name AS course_name, t.name AS tournament_name, u.name AS player_name
    FROM users.rounds r
    LEFT JOIN courses.courses c ON c.id = r.course_id
    LEFT JOIN tournaments.tournaments t ON t.id = r.tournament_id
    LEFT JOIN users.users u ON u.id = r.user_id
"""

_INSERT_HOLE_SCORES = """
    INSERT INTO users.hole_scores
    (round_id, hole_number, par, strokes, strokes_over_par, putts, club)
    VALUES ($1, $2, $3, $4, $5, $6, $7)
"""


class RoundRepositoryDB:
    """Async CRUD for rounds and their hole scores."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def _assemble_round(self, conn, round_row) -> Round:
        """Build a full Round model from a joined round row."""
        score_rows = await conn.fetch(
            """SELECT * FROM users.hole_scores
               WHERE round_id = $1 ORDER BY hole_number""",
            round_row["id"],
        )
        return round_from_rows(round_row, score_rows)

    async def _fetch_round(self, conn, round_id) -> Optional[Round]:
        row = await conn.fetchrow(f"{_ROUND_SELECT} WHERE r.id = $1", round_id)
        if not row:
            return None
        return await self._assemble_round(conn, row)

    # ================================================================
    # Read
    # ================================================================

    async def get_round(self, round_id: str) -> Optional[Round]:
        """Get a round with hole scores and joined names."""
        async with self._pool.acquire() as conn:
            return await self._fetch_round(conn, to_uuid(round_id))

    async def list_rounds_for_user(
        self, user_id: str, *, limit: int = 100, offset: int = 0
    ) -> List[Round]:
        """Get a user's rounds, newest first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"""{_ROUND_SELECT}
                    WHERE r.user_id = $1
                    ORDER BY r.round_date DESC
                    LIMIT $2 OFFSET $3""",
                to_uuid(user_id), limit, offset,
            )
            return [await self._assemble_round(conn, r) for r in rows]

    async def list_rounds_by_status(
        self, status: str, *, limit: int = 100, offset: int = 0
    ) -> List[Round]:
        """All players' rounds in a review state, newest first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"""{_ROUND_SELECT}
                    WHERE r.status = $1
                    ORDER BY r.round_date DESC
                    LIMIT $2 OFFSET $3""",
                status, limit, offset,
            )
            return [await self._assemble_round(conn, r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_round(self, round_: Round) -> Round:
        """Insert a round and all its hole scores in one transaction."""
        data = round_to_row(round_)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    round_row = await conn.fetchrow(
                        """INSERT INTO users.rounds
                           (user_id, course_id, tournament_id, round_date, tee,
                            total_score, total_par, weather, notes, status)
                           VALUES ($1, $2, $3, $4, $5, $6, $7, $8::jsonb, $9, $10)
                           RETURNING id""",
                        data["user_id"], data["course_id"], data["tournament_id"],
                        data["round_date"], data["tee"], data["total_score"],
                        data["total_par"], data["weather"], data["notes"], data["status"],
                    )
                    new_round_id = round_row["id"]
                    await conn.executemany(
                        _INSERT_HOLE_SCORES,
                        [hole_score_to_row(hs, new_round_id) for hs in round_.hole_scores],
                    )
                return await self._fetch_round(conn, new_round_id)
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(f"Round references a missing user or course: {e}") from e

    # ================================================================
    # Update
    # ================================================================

    async def save_round(self, round_: Round) -> Round:
        """Persist an edited round: row fields, totals, review state and hole scores."""
        rid = to_uuid(round_.id)
        data = round_to_row(round_)
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                result = await conn.execute(
                    """UPDATE users.rounds
                       SET round_date = $2, tee = $3, total_score = $4, total_par = $5,
                           weather = $6::jsonb, notes = $7, status = $8,
                           confirmed_by = $9, confirmed_at = $10
                       WHERE id = $1""",
                    rid, data["round_date"], data["tee"], data["total_score"],
                    data["total_par"], data["weather"], data["notes"], data["status"],
                    data["confirmed_by"], data["confirmed_at"],
                )
                if result == "UPDATE 0":
                    raise NotFoundError(f"Round {round_.id} not found")

                await conn.execute("DELETE FROM users.hole_scores WHERE round_id = $1", rid)
                await conn.executemany(
                    _INSERT_HOLE_SCORES,
                    [hole_score_to_row(hs, rid) for hs in round_.hole_scores],
                )
            return await self._fetch_round(conn, rid)

    async def save_review(self, round_: Round) -> Round:
        """Persist only the review fields of a round."""
        rid = to_uuid(round_.id)
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                """UPDATE users.rounds
                   SET status = $2, confirmed_by = $3, confirmed_at = $4
                   WHERE id = $1""",
                rid, round_.status.value,
                to_uuid(round_.confirmed_by) if round_.confirmed_by else None,
                round_.confirmed_at,
            )
            if result == "UPDATE 0":
                raise NotFoundError(f"Round {round_.id} not found")
            return await self._fetch_round(conn, rid)
