"""
Database models for the rating service.
"""
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from datetime import datetime, timezone
from uuid import uuid4

from libs.domain_types import LetterGrade, SubjectKind

from .base import Base


def _new_question_id() -> str:
    return uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Question(Base):
    """Catalog question answered for every rated subject."""

    __tablename__ = "questions"

    id = Column(String(64), primary_key=True, default=_new_question_id)
    header = Column(String(255), nullable=False, default="")
    question = Column(Text, nullable=False)
    helptext = Column(Text, nullable=False, default="")
    # Zero or NULL means the default weight (100) is applied when scoring
    weight = Column(Integer, nullable=True, default=100)
    # JSON array of {"answer": str, "points": number | null}; null points = not applicable
    options = Column(JSON, nullable=False, default=list)
    position = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utc_now, nullable=False)

    __table_args__ = (
        CheckConstraint("weight IS NULL OR weight >= 0", name="ck_questions_weight"),
    )


class Rating(Base):
    """One user's questionnaire state and review for one subject."""

    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, index=True)
    # Namespaced subject key, e.g. "movie:603"
    subject_id = Column(String(64), nullable=False)
    user_id = Column(String(64), nullable=False)
    user_name = Column(String(255), nullable=False, default="")
    # JSON array of {"question_id": str, "answer": int}
    answers = Column(JSON, nullable=False, default=list)
    review = Column(Text, nullable=False, default="")
    # Set only once the questionnaire is completed
    users_rating = Column(Enum(LetterGrade), nullable=True)
    # {"sum_score_by_question": {question_id: number}, "total": int}
    raw_args = Column(JSON, nullable=True)
    # Mirror of raw_args["total"] so the sample can be ordered in SQL
    raw_args_total = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utc_now, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("subject_id", "user_id", name="uq_ratings_subject_user"),
        Index("ix_ratings_subject_total", "subject_id", "raw_args_total"),
    )


class Subject(Base):
    """Per-subject summary of the global grade and activity counters."""

    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(String(64), nullable=False, unique=True)
    kind = Column(Enum(SubjectKind), nullable=False, index=True)
    rating = Column(Enum(LetterGrade), nullable=False, default=LetterGrade.UNKNOWN)
    rated_counter = Column(Integer, nullable=False, default=0)
    reviews_counter = Column(Integer, nullable=False, default=0)
    rating_updated_at = Column(DateTime(timezone=True), nullable=True, index=True)
