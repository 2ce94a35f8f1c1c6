"""
Free-text reviews attached to a user's rating.

A review can exist without any quiz answers. The subject's review counter
tracks how many ratings currently carry a non-empty review.
"""
import logging
from typing import Optional

from libs.domain_types import SubjectKind

from rating_service.core.rating import UserRating, make_subject_id, subject_prefix
from rating_service.core.validators import StringSanitizer
from rating_service.db.rating_store import RatingStore
from rating_service.db.subject_store import SubjectStore

logger = logging.getLogger(__name__)


class ReviewService:
    """Adds and removes reviews and keeps the subject counters in step."""

    def __init__(self, ratings: RatingStore, subjects: SubjectStore):
        self.ratings = ratings
        self.subjects = subjects

    async def add_review(
        self,
        kind: SubjectKind,
        external_id: str,
        user_id: str,
        user_name: str,
        text: str,
    ) -> Optional[UserRating]:
        """
        Set the user's review of a subject.

        Blank text changes nothing. Otherwise the text is sanitized and
        replaces any existing review; a rating without answers is created if
        the user has none yet.

        Returns:
            The user's rating after the change, or None if blank text was
            submitted and the user has no rating
        """
        subject_id = make_subject_id(subject_prefix(kind), external_id)
        rating = await self.ratings.get_rating(subject_id, user_id)

        review = StringSanitizer.sanitize_review(text or "")
        if not review:
            return rating

        had_review = bool(rating and rating.review)

        if rating is None:
            rating = UserRating(
                subject_id=subject_id,
                user_id=user_id,
                user_name=user_name,
                answers=[],
            )
        rating.review = review

        await self.ratings.upsert_rating(rating)

        if not had_review:
            await self.subjects.adjust_reviews(subject_id, kind, 1)

        logger.info(
            f"Review saved for {subject_id}",
            extra={"subject_id": subject_id},
        )
        return rating

    async def delete_review(
        self, kind: SubjectKind, external_id: str, user_id: str
    ) -> Optional[UserRating]:
        """
        Clear the user's review of a subject.

        Returns:
            The user's rating after the change, or None if there is none
        """
        subject_id = make_subject_id(subject_prefix(kind), external_id)
        rating = await self.ratings.get_rating(subject_id, user_id)
        if rating is None:
            return None

        had_review = bool(rating.review)
        rating.review = ""
        await self.ratings.upsert_rating(rating)

        if had_review:
            await self.subjects.adjust_reviews(subject_id, kind, -1)
            logger.info(
                f"Review deleted for {subject_id}",
                extra={"subject_id": subject_id},
            )

        return rating
