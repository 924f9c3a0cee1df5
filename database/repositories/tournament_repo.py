"""Tournaments with their participants and leaderboard.

Every mutation runs in a transaction holding a row lock on the tournament
(SELECT ... FOR UPDATE), applies the rule from ``scoring`` to the assembled
model and writes the result back. Concurrent submissions for the same
tournament therefore serialize instead of overwriting each other.
"""

import asyncpg
import logging
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from models import (
    LeaderboardEntry,
    Participant,
    Tournament,
    TournamentDetails,
    TournamentWinners,
)
from database.converters import (
    leaderboard_to_rows,
    to_uuid,
    tournament_from_rows,
    tournament_to_row,
)
from database.exceptions import DuplicateError, IntegrityError, NotFoundError
from scoring import lifecycle
from scoring.leaderboard import LeaderboardMode, apply_round_score

logger = logging.getLogger(__name__)

_TOURNAMENT_SELECT = """
    SELECT t.*, c.name AS course_name, o.name AS organizer_name
    FROM tournaments.tournaments t
    LEFT JOIN courses.courses c ON c.id = t.course_id
    LEFT JOIN users.users o ON o.id = t.organizer_id
"""


class TournamentRepositoryDB:
    """Async CRUD and locked state transitions for tournaments."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Private helpers
    # ================================================================

    async def _assemble(self, conn, tournament_row) -> Tournament:
        participant_rows = await conn.fetch(
            """SELECT * FROM tournaments.participants
               WHERE tournament_id = $1 ORDER BY registration_date""",
            tournament_row["id"],
        )
        leaderboard_rows = await conn.fetch(
            """SELECT l.*, u.name AS player_name
               FROM tournaments.leaderboard_entries l
               LEFT JOIN users.users u ON u.id = l.user_id
               WHERE l.tournament_id = $1 ORDER BY l.position""",
            tournament_row["id"],
        )
        return tournament_from_rows(tournament_row, participant_rows, leaderboard_rows)

    async def _lock(self, conn, tid: UUID) -> Tournament:
        """Load a tournament while holding its row lock. Must run inside a transaction."""
        row = await conn.fetchrow(f"{_TOURNAMENT_SELECT} WHERE t.id = $1 FOR UPDATE OF t", tid)
        if not row:
            raise NotFoundError(f"Tournament {tid} not found")
        return await self._assemble(conn, row)

    async def _set_status(self, conn, tid: UUID, tournament: Tournament) -> None:
        await conn.execute(
            "UPDATE tournaments.tournaments SET status = $2 WHERE id = $1",
            tid, tournament.status.value,
        )

    # ================================================================
    # Read
    # ================================================================

    async def get_tournament(self, tournament_id: str) -> Optional[Tournament]:
        """Get a tournament with course/organizer names, participants and standings."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"{_TOURNAMENT_SELECT} WHERE t.id = $1", to_uuid(tournament_id)
            )
            if not row:
                return None
            return await self._assemble(conn, row)

    async def list_tournaments(self, *, limit: int = 100, offset: int = 0) -> List[Tournament]:
        """All tournaments by start date, soonest first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"{_TOURNAMENT_SELECT} ORDER BY t.start_date LIMIT $1 OFFSET $2",
                limit, offset,
            )
            return [await self._assemble(conn, r) for r in rows]

    # ================================================================
    # Create / update
    # ================================================================

    async def create_tournament(self, tournament: Tournament) -> Tournament:
        data = tournament_to_row(tournament)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO tournaments.tournaments
                       (name, description, course_id, organizer_id, start_date, end_date,
                        format, max_participants, entry_fee, prizes, status)
                       VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10::jsonb, $11)
                       RETURNING id""",
                    data["name"], data["description"], data["course_id"],
                    data["organizer_id"], data["start_date"], data["end_date"],
                    data["format"], data["max_participants"], data["entry_fee"],
                    data["prizes"], data["status"],
                )
                created = await conn.fetchrow(f"{_TOURNAMENT_SELECT} WHERE t.id = $1", row["id"])
                return await self._assemble(conn, created)
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(f"Tournament references a missing course or organizer: {e}") from e

    async def update_details(self, tournament_id: str, details: TournamentDetails) -> Tournament:
        tid = to_uuid(tournament_id)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    updated = lifecycle.update_details(await self._lock(conn, tid), details)
                    data = tournament_to_row(updated)
                    await conn.execute(
                        """UPDATE tournaments.tournaments
                           SET name = $2, description = $3, course_id = $4, start_date = $5,
                               end_date = $6, format = $7, max_participants = $8,
                               entry_fee = $9, prizes = $10::jsonb
                           WHERE id = $1""",
                        tid, data["name"], data["description"], data["course_id"],
                        data["start_date"], data["end_date"], data["format"],
                        data["max_participants"], data["entry_fee"], data["prizes"],
                    )
                row = await conn.fetchrow(f"{_TOURNAMENT_SELECT} WHERE t.id = $1", tid)
                return await self._assemble(conn, row)
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(f"Tournament references a missing course: {e}") from e

    # ================================================================
    # Registration
    # ================================================================

    async def register(
        self, tournament_id: str, user_id: str, now: Optional[datetime] = None
    ) -> Participant:
        tid = to_uuid(tournament_id)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    _, participant = lifecycle.register(await self._lock(conn, tid), user_id, now)
                    await conn.execute(
                        """INSERT INTO tournaments.participants
                           (tournament_id, user_id, registration_date, paid)
                           VALUES ($1, $2, $3, $4)""",
                        tid, to_uuid(user_id), participant.registration_date, participant.paid,
                    )
                    return participant
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError("You are already registered for this tournament") from e

    async def unregister(self, tournament_id: str, user_id: str) -> None:
        """Remove the user's registration; no error when they were not registered."""
        tid = to_uuid(tournament_id)
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await self._lock(conn, tid)
                await conn.execute(
                    """DELETE FROM tournaments.participants
                       WHERE tournament_id = $1 AND user_id = $2""",
                    tid, to_uuid(user_id),
                )

    # ================================================================
    # Status transitions
    # ================================================================

    async def activate(self, tournament_id: str) -> Tournament:
        tid = to_uuid(tournament_id)
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                updated = lifecycle.activate(await self._lock(conn, tid))
                await self._set_status(conn, tid, updated)
        return updated

    async def close(self, tournament_id: str) -> Tuple[Tournament, TournamentWinners]:
        """Complete a tournament and return its top three."""
        tid = to_uuid(tournament_id)
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                updated, winners = lifecycle.close(await self._lock(conn, tid))
                await self._set_status(conn, tid, updated)
        logger.info("Tournament %s closed", tournament_id)
        return updated, winners

    # ================================================================
    # Leaderboard
    # ================================================================

    async def record_score(
        self,
        tournament_id: str,
        user_id: str,
        total_score: int,
        mode: LeaderboardMode,
        *,
        round_id: Optional[str] = None,
    ) -> List[LeaderboardEntry]:
        """Apply a round's total to the tournament leaderboard and store the new order."""
        tid = to_uuid(tournament_id)
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                tournament = await self._lock(conn, tid)
                board = apply_round_score(
                    tournament.leaderboard, user_id, total_score, mode, round_id=round_id
                )
                await conn.execute(
                    "DELETE FROM tournaments.leaderboard_entries WHERE tournament_id = $1", tid
                )
                await conn.executemany(
                    """INSERT INTO tournaments.leaderboard_entries
                       (tournament_id, user_id, total_score, position, round_ids)
                       VALUES ($1, $2, $3, $4, $5::uuid[])""",
                    leaderboard_to_rows(board, tid),
                )
                return board
