"""Commit-or-rollback wrapper used by every state-changing application service.

Business errors (AppError) roll back and propagate unchanged. Storage errors
(deadlock, serialization failure, constraint violation, timeout) roll back and
surface as TransactionFailedError so raw driver exceptions never reach callers.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_common.errors import TransactionFailedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_in_transaction(
    db: AsyncSession, work: Callable[[], Awaitable[T]], *, action: str
) -> T:
    try:
        result = await work()
        await db.commit()
    except DBAPIError as exc:
        await db.rollback()
        logger.warning("%s rolled back on storage error: %s", action, exc.__class__.__name__)
        raise TransactionFailedError() from exc
    except Exception:
        await db.rollback()
        raise
    return result
