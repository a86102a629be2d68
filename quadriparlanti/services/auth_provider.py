# /quadriparlanti/services/auth_provider.py

"""
The authentication provider behind the backend facade.

It owns the `auth_accounts` credential store and the token formats: session
tokens resolve to an Identity, action links (invite, magic link, recovery)
point at `/auth/callback` and are exchanged there for a session. Privileged
operations are grouped under the `admin_*` names.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple
from urllib.parse import urlencode

from ..core import security
from ..core.config import Settings
from ..core.exceptions import AuthenticationError, BackendError
from ..db.models.user_model import AuthAccount
from ..models.auth_model import Identity
from . import notification_service
from .database_helpers.auth_repository_sql import AuthRepositorySQL
from .database_helpers.user_repository_sql import UserRepositorySQL

logger = logging.getLogger(__name__)


def is_safe_redirect(path: Optional[str]) -> bool:
    """Only same-site absolute paths may be used as post-login destinations."""
    return bool(path) and path.startswith("/") and not path.startswith("//")


class AuthProvider:
    def __init__(self, auth_repo: AuthRepositorySQL, user_repo: UserRepositorySQL, settings: Settings):
        self.auth_repo = auth_repo
        self.user_repo = user_repo
        self.settings = settings

    # --- Sessions ---

    def get_user(self, access_token: Optional[str]) -> Optional[Identity]:
        """
        Resolves a session token to the caller's identity. Missing, expired or
        tampered tokens and tokens whose profile no longer exists all yield None.
        """
        if not access_token:
            return None
        claims = security.decode_token(access_token)
        if not claims:
            return None
        profile = self.user_repo.get_user_by_id(claims["sub"])
        if not profile:
            return None
        return Identity(
            id=profile.id,
            email=profile.email,
            role=profile.role,
            status=profile.status,
            name=profile.name,
        )

    def sign_in_with_password(self, email: str, password: str) -> AuthAccount:
        account = self.auth_repo.get_account_by_email(email.strip().lower())
        if not account or not security.verify_password(password, account.password_hash):
            raise AuthenticationError("Credenziali non valide. Verifica email e password.")
        return account

    def issue_session(self, account_id: str, email: str, role: str) -> str:
        return security.create_access_token(subject=account_id, email=email, role=role)

    def update_password(self, account_id: str, new_password: str) -> AuthAccount:
        account = self.auth_repo.update_account(account_id, {"password_hash": security.hash_password(new_password)})
        if not account:
            raise BackendError("Account non trovato")
        return account

    # --- Action links ---

    def build_link(self, account: AuthAccount, link_type: str, redirect_to: str) -> str:
        token = security.create_link_token(subject=account.id, email=account.email, link_type=link_type)
        query = urlencode({"token": token, "next": redirect_to})
        return f"{self.settings.site_url}/auth/callback?{query}"

    def verify_link(self, token: str) -> Tuple[AuthAccount, str]:
        """
        Validates an action-link token. Following any link proves ownership of
        the mailbox, so the account's email becomes confirmed.
        """
        claims = security.decode_token(token, expected_types=security.LINK_TOKEN_TYPES)
        if not claims:
            raise AuthenticationError("invalid_token")
        account = self.auth_repo.get_account_by_id(claims["sub"])
        if not account:
            raise AuthenticationError("invalid_token")
        if account.email_confirmed_at is None:
            account = self.auth_repo.update_account(account.id, {"email_confirmed_at": datetime.now(timezone.utc)})
        return account, claims["type"]

    def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        # Unknown addresses are accepted silently so the endpoint cannot be
        # used to probe which emails have accounts.
        account = self.auth_repo.get_account_by_email(email.strip().lower())
        if not account:
            logger.info("Password reset requested for unknown email")
            return
        link = self.build_link(account, "recovery", redirect_to)
        notification_service.send_password_reset_email(account.email, link)

    # --- Privileged operations ---

    def admin_create_user(
        self,
        email: str,
        password: str,
        email_confirm: bool,
        user_metadata: Optional[Dict] = None,
    ) -> AuthAccount:
        return self.auth_repo.add_account({
            "email": email.strip().lower(),
            "password_hash": security.hash_password(password),
            "email_confirmed_at": datetime.now(timezone.utc) if email_confirm else None,
            "user_metadata": user_metadata or {},
        })

    def admin_get_user_by_id(self, account_id: str) -> Optional[AuthAccount]:
        return self.auth_repo.get_account_by_id(account_id)

    def admin_delete_user(self, account_id: str) -> bool:
        return self.auth_repo.delete_account(account_id)

    def admin_generate_link(self, link_type: str, email: str, redirect_to: str) -> str:
        account = self.auth_repo.get_account_by_email(email.strip().lower())
        if not account:
            raise BackendError(f"No auth account for {email}")
        return self.build_link(account, link_type, redirect_to)

    def admin_invite_user_by_email(self, email: str, redirect_to: str, name: Optional[str] = None) -> bool:
        """Sends an invitation link. Returns whether the email actually went out."""
        link = self.admin_generate_link("invite", email, redirect_to)
        return notification_service.send_invitation_email(email, name, link)
