"""
Database stores for questions, ratings and subject summaries.
"""
from .accessors import build_accessors, build_engine
from .question_catalog import QuestionCatalog
from .rating_store import RatingStore
from .subject_store import SubjectStore

__all__ = [
    "build_accessors",
    "build_engine",
    "QuestionCatalog",
    "RatingStore",
    "SubjectStore",
]
