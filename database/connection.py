import asyncpg
import logging
from typing import Optional

logger = logging.getLogger(__name__)

APPLICATION_NAME = "golf-club-api"


class DatabasePool:
    """Owns the process-wide asyncpg pool shared by every repository."""

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    async def initialize(
        self,
        dsn: Optional[str] = None,
        *,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30,
    ) -> None:
        """Open the pool once at startup.

        Without a DSN asyncpg falls back to the standard PGHOST/PGDATABASE/...
        environment variables.
        """
        if self._pool is not None:
            return
        if min_size > max_size:
            raise ValueError(f"DB pool min_size ({min_size}) exceeds max_size ({max_size})")
        self._pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
            server_settings={"application_name": APPLICATION_NAME},
        )
        logger.info("Database pool ready (min=%d, max=%d)", min_size, max_size)

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool not initialized")
        return self._pool

    async def health_check(self) -> bool:
        """True when a pooled connection answers SELECT 1."""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (asyncpg.PostgresError, OSError):
            logger.warning("Database health check failed", exc_info=True)
            return False


db = DatabasePool()
