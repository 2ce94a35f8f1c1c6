"""
API v1 router combining all v1 endpoints.
"""
from fastapi import APIRouter
from rating_service.api.v1 import answers, health, questions, subjects

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(questions.router, prefix="/questions", tags=["questions"])
api_router.include_router(answers.router, prefix="/answers", tags=["answers"])
api_router.include_router(subjects.router, prefix="/subjects", tags=["subjects"])
