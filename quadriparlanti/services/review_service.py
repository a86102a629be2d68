# /quadriparlanti/services/review_service.py

"""
The admin review workflow for submitted works.

Approving publishes a work; rejecting sends it back to its author with the
reviewer's comments. In both cases the status change is the operation that
must succeed: the review record and the notification email are recorded on a
best-effort basis and their failures are only logged.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..core.exceptions import BackendError, NotFoundError
from ..db.models.work_models import Work as WorkRecord
from ..models.auth_model import Identity
from ..models.review_model import (
    CreateReviewInput,
    ReviewQueueItem,
    ReviewQueueResponse,
    ReviewResult,
    Work,
    WorkReview,
    WorkStatus,
)
from . import notification_service
from .auth_service import require_admin
from .database_service import BackendService

logger = logging.getLogger(__name__)

WORK_NOT_FOUND_MESSAGE = "Lavoro non trovato"


def _as_aware(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored in UTC.
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def hours_pending(work: WorkRecord, now: Optional[datetime] = None) -> float:
    """Hours since submission, or since creation for works never stamped as submitted."""
    now = now or datetime.now(timezone.utc)
    since = work.submitted_at or work.created_at
    if since is None:
        return 0.0
    return round(max((now - _as_aware(since)).total_seconds(), 0) / 3600, 1)


def get_review_queue(actor: Identity, db: BackendService) -> ReviewQueueResponse:
    require_admin(actor)
    try:
        rows = db.get_pending_works()
    except BackendError as e:
        logger.error("ERROR loading the review queue: %s", e)
        raise BackendError("Errore durante il caricamento della coda") from e

    now = datetime.now(timezone.utc)
    items = [
        ReviewQueueItem(
            id=row["work"].id,
            title_it=row["work"].title_it,
            description_it=row["work"].description_it,
            class_name=row["work"].class_name,
            teacher_name=row["work"].teacher_name,
            school_year=row["work"].school_year,
            submitted_at=row["work"].submitted_at,
            created_at=row["work"].created_at,
            edit_count=row["work"].edit_count or 0,
            teacher_full_name=row["teacher_full_name"],
            teacher_email=row["teacher_email"],
            attachment_count=row["attachment_count"],
            link_count=row["link_count"],
            hours_pending=hours_pending(row["work"], now),
        )
        for row in rows
    ]
    return ReviewQueueResponse(works=items, total=len(items))


def _record_review(review: CreateReviewInput, actor: Identity, db: BackendService) -> None:
    try:
        db.create_review_record({
            "work_id": review.work_id,
            "reviewer_id": actor.id,
            "action": review.action.value,
            "comments": review.comments,
        })
    except BackendError as e:
        logger.error("ERROR recording %s review for work %s: %s", review.action.value, review.work_id, e)


def _work_url(work_id: str, db: BackendService) -> str:
    return f"{db.settings.site_url}/{db.settings.default_locale}/works/{work_id}"


def approve_work(review: CreateReviewInput, actor: Identity, db: BackendService) -> ReviewResult:
    require_admin(actor)
    if not db.get_work_by_id(review.work_id):
        raise NotFoundError(WORK_NOT_FOUND_MESSAGE)

    try:
        work = db.update_work_record(review.work_id, {
            "status": WorkStatus.PUBLISHED.value,
            "published_at": datetime.now(timezone.utc),
        })
    except BackendError as e:
        logger.error("ERROR approving work %s: %s", review.work_id, e)
        raise BackendError("Errore durante l'approvazione del lavoro") from e

    _record_review(review, actor, db)

    author = work.creator
    if author:
        notification_service.send_work_approved_email(author.email, author.name, work.title_it, _work_url(work.id, db))
    logger.info("Work %s approved by %s", work.id, actor.email)

    return ReviewResult(message="Lavoro approvato con successo", work=Work.model_validate(work))


def reject_work(review: CreateReviewInput, actor: Identity, db: BackendService) -> ReviewResult:
    require_admin(actor)
    if not db.get_work_by_id(review.work_id):
        raise NotFoundError(WORK_NOT_FOUND_MESSAGE)

    try:
        work = db.update_work_record(review.work_id, {"status": WorkStatus.NEEDS_REVISION.value})
    except BackendError as e:
        logger.error("ERROR rejecting work %s: %s", review.work_id, e)
        raise BackendError("Errore durante il rifiuto del lavoro") from e

    _record_review(review, actor, db)

    author = work.creator
    if author:
        notification_service.send_work_rejected_email(author.email, author.name, work.title_it, review.comments)
    logger.info("Work %s sent back for revision by %s", work.id, actor.email)

    return ReviewResult(message="Lavoro rinviato per revisione", work=Work.model_validate(work))


def get_work_reviews(work_id: str, actor: Identity, db: BackendService) -> List[WorkReview]:
    require_admin(actor)
    try:
        reviews = db.get_reviews_by_work_id(work_id)
    except BackendError as e:
        logger.error("ERROR loading reviews for work %s: %s", work_id, e)
        raise BackendError("Errore durante il caricamento delle revisioni") from e
    return [WorkReview.model_validate(r) for r in reviews]


def get_own_works(actor: Identity, db: BackendService) -> List[Dict]:
    """
    The caller's works, newest first, each with its external links and the
    latest review so a teacher can read the feedback on a rejected work.
    """
    try:
        works = db.get_works_by_creator(actor.id)
        return [
            {
                "work": work,
                "links": db.get_links_by_work_id(work.id),
                "last_review": next(iter(db.get_reviews_by_work_id(work.id)), None),
            }
            for work in works
        ]
    except BackendError as e:
        logger.error("ERROR loading works for %s: %s", actor.email, e)
        raise BackendError("Errore durante il caricamento dei lavori") from e
