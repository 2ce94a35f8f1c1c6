"""
Input validation and sanitization utilities.
"""

import re
import html


class StringSanitizer:
    """
    String sanitization utilities for preventing XSS and injection attacks.
    """

    # Control characters to strip (except newlines, tabs, carriage returns)
    CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

    REVIEW_MAX_LENGTH = 5000
    USER_NAME_MAX_LENGTH = 255

    @classmethod
    def _base_sanitize(cls, value: str, escape_html: bool = True) -> str:
        """
        Strip control characters and surrounding whitespace, then optionally
        escape HTML entities.
        """
        value = cls.CONTROL_CHARS_PATTERN.sub("", value)
        value = value.strip()

        if escape_html:
            value = html.escape(value)

        return value

    @classmethod
    def sanitize_review(cls, review: str) -> str:
        """
        Sanitize a free-text review.

        Args:
            review: Review text as submitted

        Returns:
            Sanitized review, truncated and HTML-escaped
        """
        review = cls._base_sanitize(review, escape_html=False)

        if len(review) > cls.REVIEW_MAX_LENGTH:
            review = review[: cls.REVIEW_MAX_LENGTH]

        return html.escape(review)

    @classmethod
    def sanitize_user_name(cls, name: str) -> str:
        """
        Sanitize a display name forwarded by the gateway.

        Whitespace runs are collapsed so the short form can split on spaces.
        """
        name = cls._base_sanitize(name, escape_html=False)
        name = re.sub(r"\s+", " ", name)
        return name[: cls.USER_NAME_MAX_LENGTH]


class TextValidator:
    """
    Text validation utilities for schema field validation.
    """

    @staticmethod
    def validate_non_empty_text(value: str, field_name: str = "Text") -> str:
        """
        Validate that text is not empty or whitespace-only.

        Returns:
            The stripped value if valid

        Raises:
            ValueError: If the text is empty or whitespace-only
        """
        stripped = value.strip()
        if not stripped:
            raise ValueError(f"{field_name} cannot be empty or whitespace-only")
        return stripped
