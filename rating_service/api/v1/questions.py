"""
Question catalog endpoint.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rating_service.db import QuestionCatalog
from rating_service.models import get_db
from rating_service.schemas.questions import QuestionListResponse, QuestionResponse

router = APIRouter()


@router.get("", response_model=QuestionListResponse)
async def get_questions(db: AsyncSession = Depends(get_db)):
    """
    Get the active rating questions in display order.
    """
    questions = await QuestionCatalog(db).get_questions()

    return QuestionListResponse(
        questions=[QuestionResponse.from_definition(q) for q in questions],
        total_count=len(questions),
    )
