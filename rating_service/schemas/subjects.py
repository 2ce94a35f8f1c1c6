"""
Pydantic schemas for subject summary endpoints.
"""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from libs.domain_types import LetterGrade, SubjectKind, SubjectOrder

from rating_service.core.datetime_utils import ensure_timezone_aware


class SubjectResponse(BaseModel):
    """Summary of one movie or show."""

    subject_id: str = Field(..., description="Namespaced subject ID (e.g. 'movie:603')")
    kind: SubjectKind
    rating: LetterGrade = Field(..., description="Latest global grade, '?' until rated")
    rated_counter: int = Field(..., description="Number of completed questionnaires")
    reviews_counter: int = Field(..., description="Number of ratings with a review")
    rating_updated_at: Optional[datetime] = None

    @field_validator("rating_updated_at")
    @classmethod
    def validate_rating_updated_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_timezone_aware(v)

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class SubjectListResponse(BaseModel):
    """One page of subject summaries."""

    subjects: List[SubjectResponse]
    order: SubjectOrder
    page: int
    page_size: int
