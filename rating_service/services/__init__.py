"""
Services package for the rating service.
"""
from .reviews import ReviewService

__all__ = ["ReviewService"]
