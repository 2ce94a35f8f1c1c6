"""
Graceful failure utilities.

Non-critical follow-up work, such as refreshing a subject's summary after a
quiz is completed, must not fail the request that triggered it. This module
provides the context manager used for that:
1. Attempting an operation
2. Logging any exception with context
3. Continuing execution without raising

This is distinct from `db_error_handling.py` which handles critical errors
that require rollback and HTTP error responses.

Usage:
    from rating_service.core.graceful_failure import graceful_failure

    async with graceful_failure("update subject summary", logger):
        await subjects.record_completion(subject_id, kind, grade)
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional


@asynccontextmanager
async def graceful_failure(
    operation_name: str,
    logger: logging.Logger,
    *,
    log_level: int = logging.WARNING,
    exc_info: bool = False,
    context: Optional[dict[str, Any]] = None,
) -> AsyncGenerator[None, None]:
    """Async context manager for operations that should not block execution.

    Unlike `async_handle_db_error`, this does NOT:
    - Raise HTTPException
    - Rollback the database session
    - Stop execution

    Args:
        operation_name: Human-readable name of the operation for logging.
        logger: The logger instance to use for logging errors.
        log_level: Logging level for error messages. Defaults to WARNING.
        exc_info: Whether to include exception traceback in log.
        context: Optional dictionary of additional context to include in the
            log message (e.g., {"subject_id": "movie:603"}).
    """
    try:
        yield
    except Exception as e:
        if context:
            context_str = ", ".join(f"{k}={v}" for k, v in context.items())
            message = f"Failed to {operation_name} ({context_str}): {e}"
        else:
            message = f"Failed to {operation_name}: {e}"

        logger.log(log_level, message, exc_info=exc_info)
