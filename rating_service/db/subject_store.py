"""
Per-subject summaries: latest global grade and activity counters.
"""
import logging
from typing import List, Optional

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from libs.domain_types import LetterGrade, SubjectKind, SubjectOrder

from rating_service.core.datetime_utils import utc_now
from rating_service.models import Subject

logger = logging.getLogger(__name__)

# Best grade first; "?" is handled separately so it always sorts last
_GRADED = (LetterGrade.A, LetterGrade.B, LetterGrade.C, LetterGrade.D, LetterGrade.F)


def _grade_rank(best_first: bool):
    grades = _GRADED if best_first else tuple(reversed(_GRADED))
    return case(
        *((Subject.rating == grade, rank) for rank, grade in enumerate(grades)),
        else_=len(grades),
    )


class SubjectStore:
    """
    Subject summary rows keyed by namespaced subject id.

    Rows are created on first use. Like ``RatingStore`` this store only
    flushes; the caller commits.
    """

    def __init__(self, db: AsyncSession, page_size: int = 20):
        self.db = db
        self.page_size = page_size

    async def get(self, subject_id: str) -> Optional[Subject]:
        result = await self.db.execute(
            select(Subject).where(Subject.subject_id == subject_id)
        )
        return result.scalar_one_or_none()

    async def _get_or_create(self, subject_id: str, kind: SubjectKind) -> Subject:
        subject = await self.get(subject_id)
        if subject is not None:
            return subject

        subject = Subject(
            subject_id=subject_id,
            kind=kind,
            rating=LetterGrade.UNKNOWN,
            rated_counter=0,
            reviews_counter=0,
        )
        try:
            # A lost insert race rolls back only this savepoint
            async with self.db.begin_nested():
                self.db.add(subject)
            return subject
        except IntegrityError:
            logger.warning(
                f"Concurrent insert for subject {subject_id}, using existing row",
                extra={"subject_id": subject_id},
            )
            subject = await self.get(subject_id)
            if subject is None:
                raise
            return subject

    async def _update(self, subject: Subject, **values) -> Subject:
        # Counters are incremented in SQL, never read-modify-write
        await self.db.execute(
            update(Subject)
            .where(Subject.id == subject.id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.refresh(subject)
        return subject

    async def record_completion(
        self, subject_id: str, kind: SubjectKind, global_grade: LetterGrade
    ) -> Subject:
        """Store the new global grade and count one more completed quiz."""
        subject = await self._get_or_create(subject_id, kind)
        subject = await self._update(
            subject,
            rating=global_grade,
            rated_counter=func.coalesce(Subject.rated_counter, 0) + 1,
            rating_updated_at=utc_now(),
        )

        logger.info(
            f"Subject {subject_id} rated {global_grade.value} "
            f"({subject.rated_counter} completed)",
            extra={"subject_id": subject_id},
        )
        return subject

    async def adjust_reviews(
        self, subject_id: str, kind: SubjectKind, delta: int
    ) -> Subject:
        """Change the review counter by ``delta``, never going below zero."""
        subject = await self._get_or_create(subject_id, kind)
        adjusted = func.coalesce(Subject.reviews_counter, 0) + delta
        return await self._update(
            subject, reviews_counter=case((adjusted < 0, 0), else_=adjusted)
        )

    async def list_subjects(
        self, kind: SubjectKind, order: SubjectOrder, page: int = 1
    ) -> List[Subject]:
        """
        One page of summaries for a kind of subject.

        Args:
            kind: Movies or shows
            order: LATEST (most recently rated first), HIGHEST (A first) or
                LOWEST (F first); ungraded subjects sort last for both grade
                orders
            page: 1-based page number

        Returns:
            Up to ``page_size`` summaries
        """
        if page < 1:
            raise ValueError("page must be >= 1")

        stmt = select(Subject).where(Subject.kind == kind)

        if order == SubjectOrder.LATEST:
            stmt = stmt.order_by(
                Subject.rating_updated_at.is_(None),
                Subject.rating_updated_at.desc(),
                Subject.id,
            )
        else:
            stmt = stmt.order_by(
                _grade_rank(best_first=order == SubjectOrder.HIGHEST),
                Subject.rating_updated_at.desc(),
                Subject.id,
            )

        stmt = stmt.offset(self.page_size * (page - 1)).limit(self.page_size)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
