# /quadriparlanti/services/database_helpers/work_repository_sql.py

"""
Raw SQLAlchemy queries for works and their review records.
"""

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...db.models.user_model import User
from ...db.models.work_models import Work, WorkAttachment, WorkLink, WorkReview
from .errors import backend_call


class WorkRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Work methods ---

    def get_work_by_id(self, work_id: str) -> Optional[Work]:
        with backend_call(self.db, "get_work_by_id"):
            return self.db.query(Work).filter(Work.id == work_id).first()

    def update_work(self, work_id: str, data: Dict) -> Optional[Work]:
        with backend_call(self.db, "update_work"):
            db_work = self.db.query(Work).filter(Work.id == work_id).first()
            if db_work:
                for key, value in data.items():
                    setattr(db_work, key, value)
                self.db.commit()
                self.db.refresh(db_work)
            return db_work

    def get_works_by_creator(self, user_id: str) -> List[Work]:
        with backend_call(self.db, "get_works_by_creator"):
            return (
                self.db.query(Work)
                .filter(Work.created_by == user_id)
                .order_by(Work.created_at.desc())
                .all()
            )

    def creator_has_works(self, user_id: str) -> bool:
        with backend_call(self.db, "creator_has_works"):
            return self.db.query(Work.id).filter(Work.created_by == user_id).first() is not None

    def get_links_by_work_id(self, work_id: str) -> List[WorkLink]:
        with backend_call(self.db, "get_links_by_work_id"):
            return self.db.query(WorkLink).filter(WorkLink.work_id == work_id).order_by(WorkLink.created_at.asc()).all()

    # --- Review queue ---

    def get_pending_works(self) -> List[Dict]:
        """
        Works waiting for review, oldest first, each joined with its creator
        and the number of attachments and links it carries.
        """
        with backend_call(self.db, "get_pending_works"):
            attachment_counts = (
                self.db.query(WorkAttachment.work_id, func.count(WorkAttachment.id).label("n"))
                .group_by(WorkAttachment.work_id)
                .subquery()
            )
            link_counts = (
                self.db.query(WorkLink.work_id, func.count(WorkLink.id).label("n"))
                .group_by(WorkLink.work_id)
                .subquery()
            )
            rows = (
                self.db.query(
                    Work,
                    User.name,
                    User.email,
                    func.coalesce(attachment_counts.c.n, 0),
                    func.coalesce(link_counts.c.n, 0),
                )
                .outerjoin(User, User.id == Work.created_by)
                .outerjoin(attachment_counts, attachment_counts.c.work_id == Work.id)
                .outerjoin(link_counts, link_counts.c.work_id == Work.id)
                .filter(Work.status == "pending_review")
                .order_by(Work.created_at.asc())
                .all()
            )
            return [
                {
                    "work": work,
                    "teacher_full_name": teacher_name,
                    "teacher_email": teacher_email,
                    "attachment_count": int(attachment_count),
                    "link_count": int(link_count),
                }
                for work, teacher_name, teacher_email, attachment_count, link_count in rows
            ]

    # --- Review records ---

    def add_review(self, record: Dict) -> WorkReview:
        with backend_call(self.db, "add_review"):
            new_review = WorkReview(**record)
            self.db.add(new_review)
            self.db.commit()
            self.db.refresh(new_review)
            return new_review

    def get_reviews_by_work_id(self, work_id: str) -> List[WorkReview]:
        with backend_call(self.db, "get_reviews_by_work_id"):
            return (
                self.db.query(WorkReview)
                .options(joinedload(WorkReview.reviewer))
                .filter(WorkReview.work_id == work_id)
                .order_by(WorkReview.reviewed_at.desc())
                .all()
            )
