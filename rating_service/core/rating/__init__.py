"""
Rating engine: quiz state machine, weighted scoring and global aggregates.
"""
from .engine import RatingEngine, SubjectAccessors
from .reconciliation import combine_with_history
from .scoring import build_score_map, calculate_rating, to_letter_grade
from .subjects import make_subject_id, subject_prefix
from .types import (
    Answer,
    AnswerOption,
    AnswerProcessingResult,
    QuestionDefinition,
    RawCalculationArguments,
    SubmittedAnswer,
    UserRating,
    sum_raw_args,
)

__all__ = [
    "RatingEngine",
    "SubjectAccessors",
    "combine_with_history",
    "build_score_map",
    "calculate_rating",
    "to_letter_grade",
    "make_subject_id",
    "subject_prefix",
    "Answer",
    "AnswerOption",
    "AnswerProcessingResult",
    "QuestionDefinition",
    "RawCalculationArguments",
    "SubmittedAnswer",
    "UserRating",
    "sum_raw_args",
]
