# /quadriparlanti/routers/auth_router.py

"""
JSON API for authentication: login, logout, the current user, and the two
password flows (request a reset link, set a new password).

A successful login returns the bearer token and also sets it as an HTTP-only
session cookie, so the same endpoint serves scripts and the browser pages.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from ..core.config import get_settings
from ..core.deps import get_current_identity, require_api_identity
from ..core.exceptions import AppError
from ..core.http_errors import to_http_exception
from ..models.auth_model import CurrentUser, Identity, LoginInput, LoginResult, MessageResponse, ResetPasswordInput, SetPasswordInput
from ..models.validation import validate_form
from ..services import auth_service
from ..services.database_service import BackendService, get_backend_service

router = APIRouter()


def set_session_cookie(response: Response, access_token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=access_token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.site_url.startswith("https://"),
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(get_settings().session_cookie_name)


@router.post("/login", response_model=LoginResult, summary="Log In With Email and Password")
def login(response: Response, payload: Dict[str, Any] = Body(...), db: BackendService = Depends(get_backend_service)):
    try:
        credentials = validate_form(LoginInput, payload)
        result = auth_service.login(credentials, db)
    except AppError as e:
        raise to_http_exception(e)
    set_session_cookie(response, result.access_token)
    return result


@router.post("/logout", response_model=MessageResponse, summary="Log Out")
def logout(response: Response):
    # Sessions are stateless tokens; forgetting the cookie ends the browser session.
    clear_session_cookie(response)
    return MessageResponse(message="Logout effettuato")


@router.get("/me", response_model=CurrentUser, summary="Get the Current User")
def read_current_user(
    identity: Identity = Depends(require_api_identity),
    db: BackendService = Depends(get_backend_service),
):
    current_user = auth_service.get_current_user(identity, db)
    if current_user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Non autenticato")
    return current_user


@router.post("/password-reset", response_model=MessageResponse, summary="Request a Password Reset Link")
def request_password_reset(payload: Dict[str, Any] = Body(...), db: BackendService = Depends(get_backend_service)):
    try:
        data = validate_form(ResetPasswordInput, payload)
        return auth_service.request_password_reset(data, db)
    except AppError as e:
        raise to_http_exception(e)


@router.post("/password", response_model=MessageResponse, summary="Set a New Password")
def update_password(
    payload: Dict[str, Any] = Body(...),
    identity: Optional[Identity] = Depends(get_current_identity),
    db: BackendService = Depends(get_backend_service),
):
    try:
        data = validate_form(SetPasswordInput, payload)
        return auth_service.update_password(identity, data, db)
    except AppError as e:
        raise to_http_exception(e)
