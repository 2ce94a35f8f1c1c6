"""
Subject summary endpoints.
"""
from fastapi import APIRouter, Depends, Path, Query

from libs.domain_types import SubjectKind, SubjectOrder

from rating_service.api.v1._dependencies import SUBJECT_ID_PATTERN, get_subject_store
from rating_service.core.error_responses import ErrorMessages, raise_not_found
from rating_service.core.rating import make_subject_id, subject_prefix
from rating_service.db import SubjectStore
from rating_service.schemas.subjects import SubjectListResponse, SubjectResponse

router = APIRouter()


@router.get("/{kind}", response_model=SubjectListResponse)
async def list_subjects(
    kind: SubjectKind,
    order: SubjectOrder = Query(
        default=SubjectOrder.LATEST,
        description="latest (recently rated first), highest (A first) or lowest (F first)",
    ),
    page: int = Query(default=1, ge=1, description="1-based page number"),
    subjects: SubjectStore = Depends(get_subject_store),
):
    """
    List rated movies or shows, one page at a time.
    """
    rows = await subjects.list_subjects(kind, order, page)

    return SubjectListResponse(
        subjects=[SubjectResponse.model_validate(row) for row in rows],
        order=order,
        page=page,
        page_size=subjects.page_size,
    )


@router.get("/{kind}/{subject_id}", response_model=SubjectResponse)
async def get_subject(
    kind: SubjectKind,
    subject_id: str = Path(
        ..., pattern=SUBJECT_ID_PATTERN, description="Movie or show id"
    ),
    subjects: SubjectStore = Depends(get_subject_store),
):
    """
    Get the summary of one movie or show.

    Raises:
        HTTPException: 404 if the subject has never been rated or reviewed
    """
    namespaced_id = make_subject_id(subject_prefix(kind), subject_id)
    subject = await subjects.get(namespaced_id)
    if subject is None:
        raise_not_found(ErrorMessages.subject_not_found(namespaced_id))

    return SubjectResponse.model_validate(subject)
