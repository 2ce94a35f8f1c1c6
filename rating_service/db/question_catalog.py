"""
Read access to the question catalog.
"""
import logging
from typing import Any, List, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rating_service.core.rating.types import AnswerOption, QuestionDefinition
from rating_service.models import Question

logger = logging.getLogger(__name__)


def option_from_dict(data: Mapping[str, Any]) -> AnswerOption:
    """Build an option from its stored JSON form.

    Missing or non-numeric points mark the option as not applicable.
    """
    points = data.get("points")
    if isinstance(points, bool) or not isinstance(points, (int, float)):
        points = None
    return AnswerOption(answer=str(data.get("answer", "")), points=points)


def question_to_definition(question: Question) -> QuestionDefinition:
    return QuestionDefinition(
        id=question.id,
        options=tuple(option_from_dict(option) for option in question.options or []),
        weight=question.weight,
        header=question.header or "",
        question=question.question,
        helptext=question.helptext or "",
    )


class QuestionCatalog:
    """Active questions in display order."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_questions(self) -> List[QuestionDefinition]:
        stmt = (
            select(Question)
            .where(Question.is_active == True)  # noqa: E712
            .order_by(Question.position, Question.id)
        )
        result = await self.db.execute(stmt)
        questions = [question_to_definition(q) for q in result.scalars().all()]

        if not questions:
            logger.warning("Question catalog is empty")

        return questions
