"""
Database error handling utilities.

This module centralizes the pattern used by every endpoint that writes:
1. Rolling back the database session on error
2. Logging the error with context
3. Raising an appropriate HTTPException

Usage:
    from rating_service.core.db_error_handling import async_handle_db_error

    async with async_handle_db_error(db, "save answer"):
        result = await engine.process_answer(submitted, user_id, user_name)
        await db.commit()
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from rating_service.core.error_responses import ErrorMessages

logger = logging.getLogger(__name__)


@asynccontextmanager
async def async_handle_db_error(
    db: AsyncSession,
    operation_name: str,
    *,
    reraise_http_exceptions: bool = True,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    log_level: int = logging.ERROR,
) -> AsyncGenerator[None, None]:
    """Async context manager for handling database errors consistently.

    Args:
        db: The async database session to roll back on error.
        operation_name: Human-readable name of the operation for error messages
            and logging (e.g., "save answer", "delete review").
        reraise_http_exceptions: If True (default), HTTPExceptions raised within
            the context are re-raised without modification.
        status_code: HTTP status code to use in the raised HTTPException.
        log_level: Logging level for error messages. Defaults to logging.ERROR.

    Raises:
        HTTPException: On any other exception, with the session rolled back.
            The detail is generic; the underlying error is only logged.

    Example:
        >>> async with async_handle_db_error(db, "save review"):
        ...     await reviews.add_review(kind, "603", user_id, user_name, text)
        ...     await db.commit()
    """
    try:
        yield
    except HTTPException:
        if reraise_http_exceptions:
            raise
        await db.rollback()
        logger.log(log_level, f"Database error during {operation_name}", exc_info=True)
        raise HTTPException(
            status_code=status_code,
            detail=ErrorMessages.database_operation_failed(operation_name),
        )
    except Exception as e:
        await db.rollback()

        logger.log(
            log_level,
            f"Database error during {operation_name}: {e}",
            exc_info=True,
        )

        raise HTTPException(
            status_code=status_code,
            detail=ErrorMessages.database_operation_failed(operation_name),
        )
