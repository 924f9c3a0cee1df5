"""Runtime settings read from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    fallback_admin_email: Optional[str] = "admin@golfpigeon.com"
    cors_origins: Tuple[str, ...] = ("http://localhost:3000",)
    log_level: str = "INFO"
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    init_schema: bool = False


def _split(value: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@lru_cache()
def load_settings() -> Settings:
    """Build Settings once per process."""
    load_dotenv()
    return Settings(
        database_url=os.environ.get("DATABASE_URL"),
        fallback_admin_email=os.environ.get("FALLBACK_ADMIN_EMAIL", "admin@golfpigeon.com") or None,
        cors_origins=_split(os.environ.get("CORS_ORIGINS", "http://localhost:3000")),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        db_pool_min_size=int(os.environ.get("DB_POOL_MIN_SIZE", "2")),
        db_pool_max_size=int(os.environ.get("DB_POOL_MAX_SIZE", "10")),
        init_schema=os.environ.get("INIT_SCHEMA", "false").lower() in ("1", "true", "yes"),
    )
