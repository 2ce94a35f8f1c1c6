"""
Shared dependencies for rating endpoints.

Callers are authenticated by the gateway in front of this service, which
forwards the user's ID and full name as request headers.
"""
import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from libs.domain_types import SubjectKind

from rating_service.core.config import settings
from rating_service.core.error_responses import ErrorMessages, raise_unauthorized
from rating_service.core.rating import RatingEngine
from rating_service.core.user_names import full_name_to_short_name
from rating_service.core.validators import StringSanitizer
from rating_service.db import RatingStore, SubjectStore, build_engine
from rating_service.models import get_db
from rating_service.services import ReviewService

logger = logging.getLogger(__name__)

# External movie or show ids must contain a non-blank character
SUBJECT_ID_PATTERN = r"^\s*\S"


@dataclass(frozen=True)
class CurrentUser:
    """Identity forwarded by the gateway."""

    user_id: str
    full_name: str

    @property
    def short_name(self) -> str:
        return full_name_to_short_name(self.full_name)


async def get_current_user(request: Request) -> CurrentUser:
    """
    Read the caller's identity from the gateway headers.

    Raises:
        HTTPException: 401 if no user ID was forwarded
    """
    user_id = request.headers.get(settings.USER_ID_HEADER, "").strip()
    if not user_id:
        raise_unauthorized(ErrorMessages.MISSING_USER_IDENTITY)

    full_name = StringSanitizer.sanitize_user_name(
        request.headers.get(settings.USER_NAME_HEADER, "")
    )
    return CurrentUser(user_id=user_id, full_name=full_name)


def get_rating_engine(
    kind: SubjectKind, db: AsyncSession = Depends(get_db)
) -> RatingEngine:
    """Rating engine for the subject kind named in the request path."""
    return build_engine(db, kind, sample_size=settings.RATING_SAMPLE_SIZE)


def get_rating_store(db: AsyncSession = Depends(get_db)) -> RatingStore:
    return RatingStore(db, sample_size=settings.RATING_SAMPLE_SIZE)


def get_subject_store(db: AsyncSession = Depends(get_db)) -> SubjectStore:
    return SubjectStore(db, page_size=settings.SUBJECTS_PAGE_SIZE)


def get_review_service(
    ratings: RatingStore = Depends(get_rating_store),
    subjects: SubjectStore = Depends(get_subject_store),
) -> ReviewService:
    return ReviewService(ratings, subjects)
