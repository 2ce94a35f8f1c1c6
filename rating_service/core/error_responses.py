"""
Standardized error response messages and builders.

This module provides consistent error messages and HTTPException builders
for the rating API.

Error Message Format Guidelines:
- Use sentence case (capitalize first letter only)
- End with a period for complete sentences
- Include relevant IDs in parentheses when helpful for debugging: "(ID: movie:603)"
- Use "Please try again later." for transient server errors

Usage:
    from rating_service.core.error_responses import ErrorMessages, raise_not_found

    if subject is None:
        raise_not_found(ErrorMessages.subject_not_found("movie:603"))
"""

from typing import NoReturn

from fastapi import HTTPException, status


class ErrorMessages:
    """Centralized error message constants and templates.

    Naming Convention:
    - Constants: SCREAMING_SNAKE_CASE for static messages
    - Methods: snake_case for templates that accept parameters
    """

    # ==========================================================================
    # Authentication Errors (401)
    # ==========================================================================
    MISSING_USER_IDENTITY = "User identity is required."

    # ==========================================================================
    # Template Methods for Dynamic Messages
    # ==========================================================================
    @staticmethod
    def subject_not_found(subject_id: str) -> str:
        return f"Subject not found (ID: {subject_id})."

    @staticmethod
    def database_operation_failed(operation: str) -> str:
        """Generic message for database operation failures."""
        return f"Failed to {operation}. Please try again later."


# ==============================================================================
# HTTPException Builder Functions
# ==============================================================================


def raise_unauthorized(detail: str) -> NoReturn:
    """Raise a 401 Unauthorized exception.

    Used when the gateway did not forward a user identity.

    Args:
        detail: User-facing error message

    Raises:
        HTTPException: 401 Unauthorized
    """
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
    )


def raise_not_found(detail: str) -> NoReturn:
    """Raise a 404 Not Found exception.

    Args:
        detail: User-facing error message

    Raises:
        HTTPException: 404 Not Found
    """
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )
