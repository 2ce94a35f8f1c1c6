"""
Wiring between the database stores and the rating engine.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from libs.domain_types import SubjectKind

from rating_service.core.rating import RatingEngine, SubjectAccessors, subject_prefix
from rating_service.db.question_catalog import QuestionCatalog
from rating_service.db.rating_store import RatingStore


def build_accessors(store: RatingStore, kind: SubjectKind) -> SubjectAccessors:
    """Store capabilities for one kind of subject, bound to a rating store."""
    return SubjectAccessors(
        subject_prefix=subject_prefix(kind),
        fetch_answers=store.get_users_answers,
        fetch_sample=store.get_sample_ratings,
        persist=store.upsert_rating,
    )


def build_engine(db: AsyncSession, kind: SubjectKind, sample_size: int) -> RatingEngine:
    """Rating engine for ``kind`` backed by the given session."""
    store = RatingStore(db, sample_size=sample_size)
    catalog = QuestionCatalog(db)
    return RatingEngine(catalog.get_questions, build_accessors(store, kind))
