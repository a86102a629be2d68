# /quadriparlanti/services/database_helpers/user_repository_sql.py

"""
Raw SQLAlchemy queries for the `users` profile table.

Teacher-specific lookups are scoped to role 'docente' at this level, so an
admin profile can never be fetched, edited or deleted through the teacher
actions.
"""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ...db.models.user_model import User
from .errors import backend_call

TEACHER_ROLE = "docente"


class UserRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Generic profile methods ---

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with backend_call(self.db, "get_user_by_id"):
            return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        with backend_call(self.db, "get_user_by_email"):
            return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def add_user(self, record: Dict) -> User:
        with backend_call(self.db, "add_user"):
            new_user = User(**record)
            self.db.add(new_user)
            self.db.commit()
            self.db.refresh(new_user)
            return new_user

    def update_user(self, user_id: str, data: Dict) -> Optional[User]:
        """Writes exactly the keys present in `data`; every other column is left alone."""
        with backend_call(self.db, "update_user"):
            db_user = self.db.query(User).filter(User.id == user_id).first()
            if db_user:
                for key, value in data.items():
                    setattr(db_user, key, value)
                self.db.commit()
                self.db.refresh(db_user)
            return db_user

    def delete_user(self, user_id: str) -> bool:
        with backend_call(self.db, "delete_user"):
            db_user = self.db.query(User).filter(User.id == user_id).first()
            if db_user:
                self.db.delete(db_user)
                self.db.commit()
                return True
            return False

    # --- Teacher methods ---

    def get_teacher_by_id(self, teacher_id: str) -> Optional[User]:
        with backend_call(self.db, "get_teacher_by_id"):
            return (
                self.db.query(User)
                .filter(User.id == teacher_id, User.role == TEACHER_ROLE)
                .first()
            )

    def list_teachers(
        self,
        offset: int,
        limit: int,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        """
        Returns one page of teachers (newest first) and the total number of
        teachers matching the same filters.
        """
        with backend_call(self.db, "list_teachers"):
            query = self.db.query(User).filter(User.role == TEACHER_ROLE)
            if status:
                query = query.filter(User.status == status)
            if search:
                term = f"%{search}%"
                query = query.filter(or_(User.name.ilike(term), User.email.ilike(term)))

            total = query.count()
            teachers = (
                query.order_by(User.created_at.desc(), User.id)
                .offset(offset)
                .limit(limit)
                .all()
            )
            return teachers, total

    def get_all_teachers(self) -> List[User]:
        with backend_call(self.db, "get_all_teachers"):
            return (
                self.db.query(User)
                .filter(User.role == TEACHER_ROLE)
                .order_by(User.name.asc())
                .all()
            )

    def count_teachers_by_status(self) -> Dict[str, int]:
        with backend_call(self.db, "count_teachers_by_status"):
            rows = (
                self.db.query(User.status, func.count(User.id))
                .filter(User.role == TEACHER_ROLE)
                .group_by(User.status)
                .all()
            )
            return {status: count for status, count in rows}
