"""
Models package for the rating service.
"""
from .base import Base, async_engine, AsyncSessionLocal, get_db
from .models import Question, Rating, Subject

__all__ = [
    "Base",
    "async_engine",
    "AsyncSessionLocal",
    "get_db",
    "Question",
    "Rating",
    "Subject",
]
