# /quadriparlanti/routers/reviews_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends

from ..core.deps import require_api_admin
from ..core.exceptions import AppError
from ..core.http_errors import to_http_exception
from ..models.auth_model import Identity
from ..models.review_model import CreateReviewInput, ReviewAction, ReviewDecision, ReviewQueueResponse, ReviewResult, WorkReview
from ..models.validation import validate_form
from ..services import review_service
from ..services.database_service import BackendService, get_backend_service

router = APIRouter()


def _review_input(work_id: str, action: ReviewAction, decision: Optional[ReviewDecision]) -> CreateReviewInput:
    return validate_form(CreateReviewInput, {
        "work_id": work_id,
        "action": action.value,
        "comments": decision.comments if decision else None,
    })


@router.get("/queue", response_model=ReviewQueueResponse, summary="Get Works Pending Review")
def get_review_queue(admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        return review_service.get_review_queue(admin, db)
    except AppError as e:
        raise to_http_exception(e)


@router.post("/{work_id}/approve", response_model=ReviewResult, summary="Approve and Publish a Work")
def approve_work(
    work_id: str,
    decision: Optional[ReviewDecision] = None,
    admin: Identity = Depends(require_api_admin),
    db: BackendService = Depends(get_backend_service),
):
    try:
        return review_service.approve_work(_review_input(work_id, ReviewAction.APPROVED, decision), admin, db)
    except AppError as e:
        raise to_http_exception(e)


@router.post("/{work_id}/reject", response_model=ReviewResult, summary="Send a Work Back for Revision")
def reject_work(
    work_id: str,
    decision: Optional[ReviewDecision] = None,
    admin: Identity = Depends(require_api_admin),
    db: BackendService = Depends(get_backend_service),
):
    try:
        return review_service.reject_work(_review_input(work_id, ReviewAction.REJECTED, decision), admin, db)
    except AppError as e:
        raise to_http_exception(e)


@router.get("/{work_id}/history", response_model=List[WorkReview], summary="Get the Review History of a Work")
def get_work_reviews(work_id: str, admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        return review_service.get_work_reviews(work_id, admin, db)
    except AppError as e:
        raise to_http_exception(e)
