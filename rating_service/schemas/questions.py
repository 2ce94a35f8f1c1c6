"""
Pydantic schemas for question endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from rating_service.core.rating.types import QuestionDefinition


class OptionResponse(BaseModel):
    """Schema for one selectable option."""

    answer: str = Field(..., description="Option label")
    points: Optional[float] = Field(
        None, description="Points awarded; null for 'not applicable'"
    )


class QuestionResponse(BaseModel):
    """Schema for individual question response."""

    id: str = Field(..., description="Question ID")
    header: str
    question: str = Field(..., description="The question text")
    helptext: str
    weight: Optional[float] = None
    options: List[OptionResponse]

    @classmethod
    def from_definition(cls, question: QuestionDefinition) -> "QuestionResponse":
        return cls(
            id=question.id,
            header=question.header,
            question=question.question,
            helptext=question.helptext,
            weight=question.weight,
            options=[
                OptionResponse(answer=option.answer, points=option.points)
                for option in question.options
            ],
        )


class QuestionListResponse(BaseModel):
    """Schema for the active question catalog."""

    questions: List[QuestionResponse]
    total_count: int = Field(..., description="Number of active questions")
