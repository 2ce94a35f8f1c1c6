"""
Answer, rating and review endpoints for movies and shows.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from libs.domain_types import AnswerResult, LetterGrade, SubjectKind

from rating_service.api.v1._dependencies import (
    SUBJECT_ID_PATTERN,
    CurrentUser,
    get_current_user,
    get_rating_engine,
    get_rating_store,
    get_review_service,
    get_subject_store,
)
from rating_service.core.db_error_handling import async_handle_db_error
from rating_service.core.graceful_failure import graceful_failure
from rating_service.core.rating import (
    AnswerProcessingResult,
    RatingEngine,
    SubmittedAnswer,
    make_subject_id,
    subject_prefix,
)
from rating_service.db import RatingStore, SubjectStore
from rating_service.models import get_db
from rating_service.schemas.answers import (
    AnswerItem,
    AnswerProcessingResponse,
    AnswerSubmit,
    RatingResponse,
    ReviewSubmit,
)
from rating_service.services import ReviewService

router = APIRouter()
logger = logging.getLogger(__name__)

STATUS_SUCCESS = "Success"
STATUS_ERROR = "Error"

# (status, message) per result; TEST_COMPLETED is formatted with the kind
RESULT_MESSAGES = {
    AnswerResult.ANSWER_ACCEPTED: (STATUS_SUCCESS, "Added answer to rating object"),
    AnswerResult.ATTEMPT_TO_RETAKE_TEST: (
        STATUS_ERROR,
        "The test has been answered already, or answer out of range",
    ),
    AnswerResult.INVALID_ANSWER: (STATUS_ERROR, "Invalid answer"),
    AnswerResult.TEST_COMPLETED: (STATUS_SUCCESS, "Updated {kind} info with new rating"),
    AnswerResult.TEST_STARTED: (STATUS_SUCCESS, "Created new rating object"),
}


def build_answer_response(
    kind: SubjectKind, outcome: AnswerProcessingResult
) -> AnswerProcessingResponse:
    status, message = RESULT_MESSAGES[outcome.result]
    completed = outcome.result == AnswerResult.TEST_COMPLETED

    return AnswerProcessingResponse(
        status=status,
        message=message.format(kind=kind.value),
        result=outcome.result,
        users_rating=outcome.users_grade if completed else None,
        global_rating=outcome.global_grade if completed else None,
    )


async def _update_subject_summary(
    db: AsyncSession,
    subjects: SubjectStore,
    subject_id: str,
    kind: SubjectKind,
    global_grade: LetterGrade,
) -> None:
    try:
        await subjects.record_completion(subject_id, kind, global_grade)
        await db.commit()
    except Exception:
        await db.rollback()
        raise


@router.post("/{kind}", response_model=AnswerProcessingResponse)
async def submit_answer(
    kind: SubjectKind,
    body: AnswerSubmit,
    current_user: CurrentUser = Depends(get_current_user),
    engine: RatingEngine = Depends(get_rating_engine),
    subjects: SubjectStore = Depends(get_subject_store),
    db: AsyncSession = Depends(get_db),
):
    """
    Submit one answer of the rating questionnaire for a movie or show.

    Rejected answers (retakes, unknown questions, out-of-range options) are
    reported in the response body with status "Error", not as HTTP errors.
    When the answer completes the questionnaire the response carries the
    user's own grade and the subject's new global grade, and the subject's
    summary is updated.

    Example:
        POST /v1/answers/movie
        {"subject_id": "603", "question_id": "q1", "answer": 1}
    """
    submitted = SubmittedAnswer(
        subject_id=body.subject_id,
        question_id=body.question_id,
        answer=body.answer,
    )

    async with async_handle_db_error(db, "save answer"):
        outcome = await engine.process_answer(
            submitted, current_user.user_id, current_user.short_name
        )
        await db.commit()

    if outcome.result == AnswerResult.TEST_COMPLETED:
        subject_id = engine.subject_id_for(submitted)
        async with graceful_failure(
            "update subject summary",
            logger,
            log_level=logging.ERROR,
            exc_info=True,
            context={"subject_id": subject_id},
        ):
            await _update_subject_summary(
                db, subjects, subject_id, kind, outcome.global_grade
            )

    return build_answer_response(kind, outcome)


@router.post("/{kind}/review", response_model=Optional[RatingResponse])
async def add_review(
    kind: SubjectKind,
    body: ReviewSubmit,
    current_user: CurrentUser = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
    db: AsyncSession = Depends(get_db),
):
    """
    Add or replace the current user's review of a movie or show.

    Blank reviews change nothing. Returns the user's rating, or null if the
    user has none.
    """
    async with async_handle_db_error(db, "save review"):
        rating = await reviews.add_review(
            kind,
            body.subject_id,
            current_user.user_id,
            current_user.short_name,
            body.review,
        )
        await db.commit()

    return RatingResponse.from_user_rating(rating) if rating is not None else None


@router.get("/{kind}/{subject_id}", response_model=Optional[List[AnswerItem]])
async def get_answers_for_current_user(
    kind: SubjectKind,
    subject_id: str = Path(
        ..., pattern=SUBJECT_ID_PATTERN, description="Movie or show id"
    ),
    current_user: CurrentUser = Depends(get_current_user),
    ratings: RatingStore = Depends(get_rating_store),
):
    """
    Get the current user's recorded answers for a movie or show.

    Returns null if the user has not answered anything yet.
    """
    rating = await ratings.get_rating(
        make_subject_id(subject_prefix(kind), subject_id), current_user.user_id
    )
    if rating is None:
        return None
    return [AnswerItem(**answer.to_dict()) for answer in rating.answers]


@router.get("/{kind}/{subject_id}/ratings", response_model=List[RatingResponse])
async def get_ratings(
    kind: SubjectKind,
    subject_id: str = Path(
        ..., pattern=SUBJECT_ID_PATTERN, description="Movie or show id"
    ),
    ratings: RatingStore = Depends(get_rating_store),
):
    """
    Get the completed ratings of a movie or show.

    Ratings are ordered by descending aggregate total and capped at
    RATING_SAMPLE_SIZE.
    """
    sample = await ratings.get_sample_ratings(
        make_subject_id(subject_prefix(kind), subject_id)
    )
    return [RatingResponse.from_user_rating(rating) for rating in sample]


@router.get(
    "/{kind}/{subject_id}/ratings/current-user",
    response_model=Optional[RatingResponse],
)
async def get_rating_for_current_user(
    kind: SubjectKind,
    subject_id: str = Path(
        ..., pattern=SUBJECT_ID_PATTERN, description="Movie or show id"
    ),
    current_user: CurrentUser = Depends(get_current_user),
    ratings: RatingStore = Depends(get_rating_store),
):
    """Get the current user's rating of a movie or show, or null."""
    rating = await ratings.get_rating(
        make_subject_id(subject_prefix(kind), subject_id), current_user.user_id
    )
    return RatingResponse.from_user_rating(rating) if rating is not None else None


@router.delete("/{kind}/{subject_id}/review", response_model=Optional[RatingResponse])
async def delete_review(
    kind: SubjectKind,
    subject_id: str = Path(
        ..., pattern=SUBJECT_ID_PATTERN, description="Movie or show id"
    ),
    current_user: CurrentUser = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
    db: AsyncSession = Depends(get_db),
):
    """Clear the current user's review. Returns the rating, or null if none."""
    async with async_handle_db_error(db, "delete review"):
        rating = await reviews.delete_review(kind, subject_id, current_user.user_id)
        await db.commit()

    return RatingResponse.from_user_rating(rating) if rating is not None else None
