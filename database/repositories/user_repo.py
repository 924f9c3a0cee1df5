"""CRUD operations for the users.users table."""

import asyncpg
import json
from typing import Optional

from models import PlayerStats, Round, User
from database.converters import stats_from_row, to_uuid, user_from_row
from database.exceptions import NotFoundError
from scoring.player_stats import record_round


class UserRepositoryDB:
    """Async access to users and their running statistics."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM users.users WHERE id = $1", to_uuid(user_id)
            )
            return user_from_row(row) if row else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM users.users WHERE LOWER(email) = LOWER($1)", email
            )
            return user_from_row(row) if row else None

    # ================================================================
    # Update
    # ================================================================

    async def update_profile(self, user_id: str, **fields) -> User:
        """Update self-service profile fields (name, handicap, preferences)."""
        allowed = {"name", "handicap", "preferences"}
        updates = {k: v for k, v in fields.items() if k in allowed and v is not None}
        if not updates:
            user = await self.get_user(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            return user

        if "preferences" in updates:
            updates["preferences"] = json.dumps(updates["preferences"])

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        values = [to_uuid(user_id)] + list(updates.values())

        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"UPDATE users.users SET {set_clause} WHERE id = $1 RETURNING *",
                *values,
            )
            if not row:
                raise NotFoundError(f"User {user_id} not found")
            return user_from_row(row)

    async def record_round_stats(self, user_id: str, round_: Round) -> PlayerStats:
        """Fold a new round into the user's stats under a row lock."""
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(
                    "SELECT * FROM users.users WHERE id = $1 FOR UPDATE",
                    to_uuid(user_id),
                )
                if not row:
                    raise NotFoundError(f"User {user_id} not found")

                stats = record_round(stats_from_row(row), round_)
                await conn.execute(
                    """UPDATE users.users
                       SET stats_total_rounds = $2, stats_average_score = $3,
                           stats_best_round = $4, stats_total_birdies = $5,
                           stats_total_eagles = $6
                       WHERE id = $1""",
                    row["id"], stats.total_rounds, stats.average_score,
                    stats.best_round, stats.total_birdies, stats.total_eagles,
                )
                return stats
