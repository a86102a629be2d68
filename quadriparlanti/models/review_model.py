# /quadriparlanti/models/review_model.py

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .validation import field_error

MIN_REJECTION_COMMENT_LENGTH = 10


class WorkStatus(str, Enum):
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    PUBLISHED = "published"
    NEEDS_REVISION = "needs_revision"
    ARCHIVED = "archived"


class ReviewAction(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewDecision(BaseModel):
    """Request body of the approve / reject endpoints."""
    comments: Optional[str] = None


class CreateReviewInput(BaseModel):
    work_id: str
    action: ReviewAction
    comments: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("work_id")
    @classmethod
    def _work_id(cls, value: str) -> str:
        try:
            uuid.UUID(value)
        except ValueError:
            raise field_error("Lavoro non valido")
        return value

    @field_validator("comments")
    @classmethod
    def _comments(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        value = value.strip() if value else None
        if info.data.get("action") == ReviewAction.REJECTED:
            if not value or len(value) <= MIN_REJECTION_COMMENT_LENGTH:
                raise field_error("I commenti sono obbligatori per il rifiuto (minimo 10 caratteri)")
        return value


class Work(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title_it: str
    title_en: Optional[str] = None
    description_it: str
    class_name: str
    teacher_name: str
    school_year: str
    status: WorkStatus
    created_by: str
    created_at: datetime
    submitted_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    edit_count: int = 0


class ReviewQueueItem(BaseModel):
    """One row of the admin review queue."""
    id: str
    title_it: str
    description_it: str
    class_name: str
    teacher_name: str
    school_year: str
    submitted_at: Optional[datetime] = None
    created_at: datetime
    edit_count: int = 0
    teacher_full_name: Optional[str] = None
    teacher_email: Optional[str] = None
    attachment_count: int = 0
    link_count: int = 0
    hours_pending: float = 0


class ReviewerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: str


class WorkReview(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    work_id: str
    reviewer_id: Optional[str] = None
    action: ReviewAction
    comments: Optional[str] = None
    reviewed_at: datetime
    reviewer: Optional[ReviewerSummary] = None


class ReviewResult(BaseModel):
    message: str
    work: Work


class ReviewQueueResponse(BaseModel):
    works: List[ReviewQueueItem]
    total: int
