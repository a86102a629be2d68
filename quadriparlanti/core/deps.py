# /quadriparlanti/core/deps.py

"""
Request dependencies: locale resolution and the session gate.

The access token is read from the `Authorization: Bearer` header or, for
browser pages, from the session cookie. Page dependencies answer a missing or
insufficient identity with a `SessionRedirect`; API dependencies answer with
401 / 403.
"""

from typing import Optional
from urllib.parse import urlencode

from fastapi import Depends, HTTPException, Request, status

from ..models.auth_model import Identity
from ..services.database_service import BackendService, get_backend_service
from .config import get_settings
from .exceptions import SessionRedirect
from .i18n import ensure_locale

INVALID_TOKEN_REDIRECT = "/login?error=invalid_token"


def get_locale(locale: str) -> str:
    """Path-parameter dependency; unsupported locales end as a 404."""
    return ensure_locale(locale)


def get_access_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return request.cookies.get(get_settings().session_cookie_name)


def get_current_identity(
    token: Optional[str] = Depends(get_access_token),
    db: BackendService = Depends(get_backend_service),
) -> Optional[Identity]:
    return db.get_current_identity(token)


# --- Page gates ---

def require_session(identity: Optional[Identity] = Depends(get_current_identity)) -> Identity:
    """Pages reached from an emailed link: without a session the link was invalid or expired."""
    if identity is None:
        raise SessionRedirect(INVALID_TOKEN_REDIRECT)
    return identity


def require_teacher_page(
    request: Request,
    locale: str = Depends(get_locale),
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    if identity is None:
        raise SessionRedirect(f"/{locale}/login?{urlencode({'redirect': request.url.path})}")
    return identity


def require_admin_page(
    locale: str = Depends(get_locale),
    identity: Identity = Depends(require_teacher_page),
) -> Identity:
    if not identity.is_admin:
        raise SessionRedirect(f"/{locale}/teacher")
    return identity


# --- API gates ---

def require_api_identity(identity: Optional[Identity] = Depends(get_current_identity)) -> Identity:
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Non autenticato",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def require_api_admin(identity: Identity = Depends(require_api_identity)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permessi insufficienti")
    return identity
