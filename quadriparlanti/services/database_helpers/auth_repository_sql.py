# /quadriparlanti/services/database_helpers/auth_repository_sql.py

"""
Raw SQLAlchemy queries for the `auth_accounts` table, the credential store
owned by the auth provider.
"""

from typing import Dict, Optional

from sqlalchemy.orm import Session

from ...db.models.user_model import AuthAccount
from .errors import backend_call


class AuthRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_account_by_id(self, account_id: str) -> Optional[AuthAccount]:
        with backend_call(self.db, "get_account_by_id"):
            return self.db.query(AuthAccount).filter(AuthAccount.id == account_id).first()

    def get_account_by_email(self, email: str) -> Optional[AuthAccount]:
        with backend_call(self.db, "get_account_by_email"):
            return self.db.query(AuthAccount).filter(AuthAccount.email == email).first()

    def add_account(self, record: Dict) -> AuthAccount:
        with backend_call(self.db, "add_account"):
            new_account = AuthAccount(**record)
            self.db.add(new_account)
            self.db.commit()
            self.db.refresh(new_account)
            return new_account

    def update_account(self, account_id: str, data: Dict) -> Optional[AuthAccount]:
        with backend_call(self.db, "update_account"):
            account = self.db.query(AuthAccount).filter(AuthAccount.id == account_id).first()
            if account:
                for key, value in data.items():
                    setattr(account, key, value)
                self.db.commit()
                self.db.refresh(account)
            return account

    def delete_account(self, account_id: str) -> bool:
        with backend_call(self.db, "delete_account"):
            account = self.db.query(AuthAccount).filter(AuthAccount.id == account_id).first()
            if account:
                self.db.delete(account)
                self.db.commit()
                return True
            return False
