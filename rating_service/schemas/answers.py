"""
Pydantic schemas for answer, rating and review endpoints.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional

from libs.domain_types import AnswerResult, LetterGrade

from rating_service.core.rating.types import UserRating
from rating_service.core.validators import TextValidator


class AnswerSubmit(BaseModel):
    """Schema for submitting one answer of the rating questionnaire."""

    subject_id: str = Field(
        ..., max_length=32, description="External movie or show ID (e.g. '603')"
    )
    question_id: str = Field(..., max_length=64, description="Question ID")
    # Out-of-range indexes are answered with INVALID_ANSWER, not a 422
    answer: int = Field(..., description="Index of the selected option")

    @field_validator("subject_id", "question_id")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        return TextValidator.validate_non_empty_text(v, "ID")


class ReviewSubmit(BaseModel):
    """Schema for adding a review to a movie or show."""

    subject_id: str = Field(..., max_length=32, description="External movie or show ID")
    review: str = Field("", description="Review text; blank text changes nothing")

    @field_validator("subject_id")
    @classmethod
    def validate_subject_id(cls, v: str) -> str:
        return TextValidator.validate_non_empty_text(v, "Subject ID")


class AnswerItem(BaseModel):
    """A recorded answer."""

    question_id: str
    answer: int


class RawArgsResponse(BaseModel):
    """Aggregate of every submission folded into a subject's global grade."""

    sum_score_by_question: Dict[str, float]
    total: int


class RatingResponse(BaseModel):
    """A user's rating of one subject."""

    subject_id: str = Field(..., description="Namespaced subject ID (e.g. 'movie:603')")
    user_id: str
    user_name: str
    answers: List[AnswerItem]
    review: str = ""
    users_rating: Optional[LetterGrade] = Field(
        None, description="User's own grade, set once the questionnaire is completed"
    )
    raw_args: Optional[RawArgsResponse] = None

    @classmethod
    def from_user_rating(cls, rating: UserRating) -> "RatingResponse":
        return cls(
            subject_id=rating.subject_id,
            user_id=rating.user_id,
            user_name=rating.user_name,
            answers=[AnswerItem(**answer.to_dict()) for answer in rating.answers],
            review=rating.review or "",
            users_rating=rating.users_rating,
            raw_args=(
                RawArgsResponse(**rating.raw_args.to_dict())
                if rating.raw_args is not None
                else None
            ),
        )


class AnswerProcessingResponse(BaseModel):
    """Outcome of submitting an answer."""

    status: str = Field(..., description="'Success' or 'Error'")
    message: str
    result: AnswerResult
    users_rating: Optional[LetterGrade] = Field(
        None, description="Set only when the answer completed the questionnaire"
    )
    global_rating: Optional[LetterGrade] = Field(
        None, description="Set only when the answer completed the questionnaire"
    )
