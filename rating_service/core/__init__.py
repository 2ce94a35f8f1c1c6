"""
Core module for application configuration and utilities.

The rating engine lives in the ``rating`` subpackage and does not import the
persistence layer; import it directly: from rating_service.core.rating import ...
"""
from .config import settings

__all__ = ["settings"]
