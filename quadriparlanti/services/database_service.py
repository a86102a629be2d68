# /quadriparlanti/services/database_service.py

"""
The backend facade used by every action.

`BackendService` plays the role a hosted backend SDK would play: it exposes
identity lookup, privileged auth operations and the typed table operations,
and hides which concrete store serves them. Each method delegates to a
repository or to the auth provider.
"""

from typing import Dict, Generator, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.config import Settings, get_settings
from ..db.database import get_db
from ..db.models.user_model import User
from ..db.models.work_models import Work, WorkLink, WorkReview
from ..models.auth_model import Identity
from .auth_provider import AuthProvider
from .database_helpers.auth_repository_sql import AuthRepositorySQL
from .database_helpers.user_repository_sql import UserRepositorySQL
from .database_helpers.work_repository_sql import WorkRepositorySQL


class BackendService:
    def __init__(self, db_session: Session, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.user_repo = UserRepositorySQL(db_session)
        self.work_repo = WorkRepositorySQL(db_session)
        self.auth = AuthProvider(AuthRepositorySQL(db_session), self.user_repo, self.settings)

    # --- IDENTITY ---
    def get_current_identity(self, access_token: Optional[str]) -> Optional[Identity]: return self.auth.get_user(access_token)

    # --- USER / TEACHER METHODS (DELEGATED) ---
    def get_user_by_id(self, user_id: str) -> Optional[User]: return self.user_repo.get_user_by_id(user_id)
    def get_user_by_email(self, email: str) -> Optional[User]: return self.user_repo.get_user_by_email(email)
    def create_user_record(self, record: Dict) -> User: return self.user_repo.add_user(record)
    def update_user_record(self, user_id: str, data: Dict) -> Optional[User]: return self.user_repo.update_user(user_id, data)
    def delete_user_record(self, user_id: str) -> bool: return self.user_repo.delete_user(user_id)
    def get_teacher_by_id(self, teacher_id: str) -> Optional[User]: return self.user_repo.get_teacher_by_id(teacher_id)
    def get_all_teachers(self) -> List[User]: return self.user_repo.get_all_teachers()
    def get_teacher_status_counts(self) -> Dict[str, int]: return self.user_repo.count_teachers_by_status()

    def list_teacher_records(self, offset: int, limit: int, status: Optional[str] = None, search: Optional[str] = None) -> Tuple[List[User], int]:
        return self.user_repo.list_teachers(offset=offset, limit=limit, status=status, search=search)

    # --- WORK & REVIEW METHODS (DELEGATED) ---
    def get_work_by_id(self, work_id: str) -> Optional[Work]: return self.work_repo.get_work_by_id(work_id)
    def update_work_record(self, work_id: str, data: Dict) -> Optional[Work]: return self.work_repo.update_work(work_id, data)
    def get_works_by_creator(self, user_id: str) -> List[Work]: return self.work_repo.get_works_by_creator(user_id)
    def teacher_has_works(self, user_id: str) -> bool: return self.work_repo.creator_has_works(user_id)
    def get_links_by_work_id(self, work_id: str) -> List[WorkLink]: return self.work_repo.get_links_by_work_id(work_id)
    def get_pending_works(self) -> List[Dict]: return self.work_repo.get_pending_works()
    def create_review_record(self, record: Dict) -> WorkReview: return self.work_repo.add_review(record)
    def get_reviews_by_work_id(self, work_id: str) -> List[WorkReview]: return self.work_repo.get_reviews_by_work_id(work_id)


def get_backend_service(db: Session = Depends(get_db)) -> Generator[BackendService, None, None]:
    """FastAPI dependency that provides a BackendService bound to the request's session."""
    yield BackendService(db_session=db)
