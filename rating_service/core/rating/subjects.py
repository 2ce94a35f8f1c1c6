"""
Subject identifiers.

Ratings for every kind of subject share one store, so rating keys are
namespaced by kind: movie 603 is stored as "movie:603", show 1399 as
"show:1399".
"""

from libs.domain_types import SubjectKind

SUBJECT_ID_SEPARATOR = ":"


def subject_prefix(kind: SubjectKind) -> str:
    return kind.value


def make_subject_id(prefix: str, external_id: str) -> str:
    """Namespaced rating key for an external subject id."""
    external_id = str(external_id).strip()
    if not external_id:
        raise ValueError("external subject id cannot be empty")
    return f"{prefix}{SUBJECT_ID_SEPARATOR}{external_id}"

