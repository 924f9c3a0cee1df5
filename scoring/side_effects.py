"""Best-effort follow-up writes that must never fail the primary operation."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Optional

from database.exceptions import NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SideEffectOutcome:
    name: str
    ok: bool
    error: Optional[str] = None


async def attempt(name: str, operation: Awaitable[Any], **context: Any) -> SideEffectOutcome:
    """Await ``operation``; log and report any failure instead of raising.

    A missing target document (NotFoundError) is expected now and then and is
    logged as a warning; anything else is logged with its traceback.
    """
    try:
        await operation
    except NotFoundError as e:
        logger.warning("Skipped %s: %s %s", name, e, context)
        return SideEffectOutcome(name=name, ok=False, error=str(e))
    except Exception as e:
        logger.exception("Side effect %s failed %s", name, context)
        return SideEffectOutcome(name=name, ok=False, error=f"{type(e).__name__}: {e}")
    return SideEffectOutcome(name=name, ok=True)
