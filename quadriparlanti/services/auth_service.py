# /quadriparlanti/services/auth_service.py

"""
Authentication actions: login, password reset, password change, and the
admin check every privileged action starts with.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from ..core.exceptions import AuthenticationError, PermissionDenied
from ..models.auth_model import CurrentUser, Identity, LoginInput, LoginResult, MessageResponse, ResetPasswordInput, SetPasswordInput
from ..models.teacher_model import Teacher, UserStatus
from .auth_provider import is_safe_redirect
from .database_service import BackendService

logger = logging.getLogger(__name__)

INACTIVE_ACCOUNT_MESSAGE = "Account non attivo. Contatta l'amministratore."


def is_admin(identity: Optional[Identity]) -> bool:
    return bool(identity and identity.is_admin)


def require_admin(identity: Optional[Identity]) -> Identity:
    """Only active admins may run privileged actions."""
    if not is_admin(identity):
        raise PermissionDenied()
    return identity


def login(credentials: LoginInput, db: BackendService) -> LoginResult:
    account = db.auth.sign_in_with_password(credentials.email, credentials.password)

    db.update_user_record(account.id, {"last_login_at": datetime.now(timezone.utc)})
    profile = db.get_user_by_id(account.id)
    if not profile or profile.status != UserStatus.ACTIVE.value:
        logger.info("Login refused for %s: account status is %s", account.email, getattr(profile, "status", None))
        raise AuthenticationError(INACTIVE_ACCOUNT_MESSAGE)

    access_token = db.auth.issue_session(profile.id, profile.email, profile.role)
    return LoginResult(role=profile.role, access_token=access_token)


def get_current_user(identity: Optional[Identity], db: BackendService) -> Optional[CurrentUser]:
    if identity is None:
        return None
    profile = db.get_user_by_id(identity.id)
    if not profile:
        return None
    return CurrentUser(id=profile.id, email=profile.email, profile=Teacher.model_validate(profile))


def request_password_reset(data: ResetPasswordInput, db: BackendService) -> MessageResponse:
    redirect_to = f"/{db.settings.default_locale}/reset-password"
    db.auth.reset_password_for_email(data.email, redirect_to=redirect_to)
    return MessageResponse(message="Email di reset inviata. Controlla la tua casella di posta.")


def update_password(identity: Optional[Identity], data: SetPasswordInput, db: BackendService) -> MessageResponse:
    """
    Changes the caller's password. Setting a password is how an invited
    teacher accepts the invitation, so 'invited' becomes 'active' here.
    """
    if identity is None:
        raise AuthenticationError("Non autenticato.")

    db.auth.update_password(identity.id, data.newPassword)

    profile = db.get_user_by_id(identity.id)
    if profile and profile.status == UserStatus.INVITED.value:
        db.update_user_record(identity.id, {"status": UserStatus.ACTIVE.value})

    return MessageResponse(message="Password aggiornata con successo.")


def exchange_link(token: str, next_path: Optional[str], db: BackendService) -> Tuple[str, str]:
    """
    Turns an emailed action link into a session. Returns the session token
    and the path to continue to.
    """
    account, link_type = db.auth.verify_link(token)
    profile = db.get_user_by_id(account.id)
    if not profile or profile.status in (UserStatus.INACTIVE.value, UserStatus.SUSPENDED.value):
        raise AuthenticationError("invalid_token")

    locale = db.settings.default_locale
    if profile.status == UserStatus.INVITED.value or link_type == "invite":
        destination = f"/{locale}/set-password"
    elif is_safe_redirect(next_path) and next_path != "/":
        destination = next_path
    elif link_type == "recovery":
        destination = f"/{locale}/reset-password"
    else:
        destination = f"/{locale}/admin" if profile.role == "admin" else f"/{locale}/teacher"

    access_token = db.auth.issue_session(profile.id, profile.email, profile.role)
    return access_token, destination
