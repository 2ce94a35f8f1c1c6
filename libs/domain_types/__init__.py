"""Shared domain types for the rating service.

This package is the single source of truth for domain enums used by the
rating engine, the persistence layer and (via OpenAPI) the web client.

Usage:
    from libs.domain_types import SubjectKind, AnswerResult, LetterGrade
"""

import enum


class SubjectKind(str, enum.Enum):
    """Kinds of subjects that can be rated."""

    MOVIE = "movie"
    SHOW = "show"


class AnswerResult(str, enum.Enum):
    """Outcome of processing a single submitted answer."""

    ANSWER_ACCEPTED = "ANSWER_ACCEPTED"
    ATTEMPT_TO_RETAKE_TEST = "ATTEMPT_TO_RETAKE_TEST"
    INVALID_ANSWER = "INVALID_ANSWER"
    TEST_STARTED = "TEST_STARTED"
    TEST_COMPLETED = "TEST_COMPLETED"


class LetterGrade(str, enum.Enum):
    """Letter grades, best first. UNKNOWN is used when no grade applies."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"
    UNKNOWN = "?"


class SubjectOrder(str, enum.Enum):
    """Sort orders for subject summary listings."""

    LATEST = "latest"
    HIGHEST = "highest"
    LOWEST = "lowest"


__all__ = [
    "SubjectKind",
    "AnswerResult",
    "LetterGrade",
    "SubjectOrder",
]
