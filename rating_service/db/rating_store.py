"""
Persistence of per-user ratings.

Rows are converted to and from the engine's ``UserRating`` value type here,
so nothing above this module touches ORM objects.
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rating_service.core.rating.types import (
    Answer,
    RawCalculationArguments,
    UserRating,
)
from rating_service.models import Rating

logger = logging.getLogger(__name__)


def rating_to_user_rating(row: Rating) -> UserRating:
    return UserRating(
        subject_id=row.subject_id,
        user_id=row.user_id,
        user_name=row.user_name,
        answers=[Answer.from_dict(answer) for answer in row.answers or []],
        review=row.review or "",
        users_rating=row.users_rating,
        raw_args=RawCalculationArguments.from_dict(row.raw_args),
    )


def _apply(row: Rating, rating: UserRating) -> None:
    row.user_name = rating.user_name
    row.answers = [answer.to_dict() for answer in rating.answers]
    row.users_rating = rating.users_rating
    if rating.raw_args is not None:
        row.raw_args = rating.raw_args.to_dict()
        row.raw_args_total = rating.raw_args.total
    else:
        row.raw_args = None
        row.raw_args_total = None
    # None keeps whatever review is stored
    if rating.review is not None:
        row.review = rating.review


class RatingStore:
    """
    Ratings keyed by (subject_id, user_id).

    The store flushes but never commits; the caller owns the transaction.

    Args:
        db: Async database session
        sample_size: Maximum number of completed ratings returned by
            ``get_sample_ratings``
    """

    def __init__(self, db: AsyncSession, sample_size: int = 50):
        self.db = db
        self.sample_size = sample_size

    async def _get_row(self, subject_id: str, user_id: str) -> Optional[Rating]:
        stmt = select(Rating).where(
            Rating.subject_id == subject_id,
            Rating.user_id == user_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_rating(self, subject_id: str, user_id: str) -> Optional[UserRating]:
        row = await self._get_row(subject_id, user_id)
        return rating_to_user_rating(row) if row is not None else None

    async def get_users_answers(self, user_id: str, subject_id: str) -> List[Answer]:
        """The user's recorded answers; empty if the user has no rating yet."""
        rating = await self.get_rating(subject_id, user_id)
        return rating.answers if rating is not None else []

    async def get_sample_ratings(self, subject_id: str) -> List[UserRating]:
        """
        Completed ratings of a subject, largest aggregate total first.

        Ratings without a stored aggregate sort after all others. At most
        ``sample_size`` ratings are returned.
        """
        stmt = (
            select(Rating)
            .where(
                Rating.subject_id == subject_id,
                Rating.users_rating.is_not(None),
            )
            .order_by(
                Rating.raw_args_total.is_(None),
                Rating.raw_args_total.desc(),
                Rating.id,
            )
            .limit(self.sample_size)
        )
        result = await self.db.execute(stmt)
        return [rating_to_user_rating(row) for row in result.scalars().all()]

    async def upsert_rating(self, rating: UserRating) -> None:
        """Insert or replace the rating stored for (subject_id, user_id)."""
        row = await self._get_row(rating.subject_id, rating.user_id)

        if row is None:
            row = Rating(
                subject_id=rating.subject_id,
                user_id=rating.user_id,
                review="",
            )
            _apply(row, rating)
            try:
                # A lost insert race rolls back only this savepoint
                async with self.db.begin_nested():
                    self.db.add(row)
                return
            except IntegrityError:
                logger.warning(
                    f"Concurrent insert for rating {rating.subject_id}/{rating.user_id}, "
                    "updating instead"
                )
                row = await self._get_row(rating.subject_id, rating.user_id)
                if row is None:
                    raise

        _apply(row, rating)
        await self.db.flush()
