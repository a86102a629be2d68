# /quadriparlanti/routers/pages_router.py

"""
Server-rendered authentication pages and the emailed-link callback.

Form posts follow the post/redirect/get pattern: a valid submission answers
with a 303 redirect, an invalid one re-renders the page with the field
messages next to the inputs.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from ..core.deps import get_current_identity, get_locale, require_session
from ..core.exceptions import AppError, AuthenticationError, FormValidationError
from ..core.i18n import DEFAULT_LOCALE
from ..models.auth_model import Identity, LoginInput, ResetPasswordInput, SetPasswordInput
from ..models.validation import validate_form
from ..presentation import render
from ..services import auth_service
from ..services.auth_provider import is_safe_redirect
from ..services.database_service import BackendService, get_backend_service
from .auth_router import clear_session_cookie, set_session_cookie

logger = logging.getLogger(__name__)

router = APIRouter()


def home_path(locale: str, role: str) -> str:
    return f"/{locale}/admin/teachers" if role == "admin" else f"/{locale}/teacher"


# --- LOGIN / LOGOUT ---

@router.get("/login", include_in_schema=False)
def login_without_locale(request: Request):
    query = f"?{request.url.query}" if request.url.query else ""
    return RedirectResponse(f"/{DEFAULT_LOCALE}/login{query}", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/{locale}/login", include_in_schema=False)
def login_page(request: Request, error: Optional[str] = None, redirect: Optional[str] = None, locale: str = Depends(get_locale)):
    return render(request, "login.html", locale, error_code=error, redirect_to=redirect, form={}, errors={})


@router.post("/{locale}/login", include_in_schema=False)
def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    redirect: str = Form(""),
    locale: str = Depends(get_locale),
    db: BackendService = Depends(get_backend_service),
):
    form = {"email": email}
    try:
        credentials = validate_form(LoginInput, {"email": email, "password": password})
        result = auth_service.login(credentials, db)
    except FormValidationError as e:
        return render(request, "login.html", locale, status_code=422, form=form, errors=e.field_errors, redirect_to=redirect)
    except AppError as e:
        return render(request, "login.html", locale, status_code=400, form=form, errors={}, message=e.message, redirect_to=redirect)

    destination = redirect if is_safe_redirect(redirect) else home_path(locale, result.role.value)
    response = RedirectResponse(destination, status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, result.access_token)
    return response


@router.post("/{locale}/logout", include_in_schema=False)
def logout(locale: str = Depends(get_locale)):
    response = RedirectResponse(f"/{locale}/login", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(response)
    return response


# --- PASSWORD FLOWS ---

@router.get("/{locale}/forgot-password", include_in_schema=False)
def forgot_password_page(request: Request, locale: str = Depends(get_locale)):
    return render(request, "forgot_password.html", locale, form={}, errors={})


@router.post("/{locale}/forgot-password", include_in_schema=False)
def forgot_password_submit(
    request: Request,
    email: str = Form(""),
    locale: str = Depends(get_locale),
    db: BackendService = Depends(get_backend_service),
):
    try:
        data = validate_form(ResetPasswordInput, {"email": email})
        result = auth_service.request_password_reset(data, db)
    except FormValidationError as e:
        return render(request, "forgot_password.html", locale, status_code=422, form={"email": email}, errors=e.field_errors)
    except AppError as e:
        return render(request, "forgot_password.html", locale, status_code=400, form={"email": email}, errors={}, message=e.message)
    return render(request, "forgot_password.html", locale, form={}, errors={}, success=result.message)


def _password_page(request: Request, template: str, locale: str, identity: Identity, **context):
    context.setdefault("errors", {})
    return render(request, template, locale, identity=identity, email=identity.email, **context)


def _password_submit(request, template, locale, identity, db, new_password, confirm_password, success_path):
    try:
        data = validate_form(SetPasswordInput, {"newPassword": new_password, "confirmPassword": confirm_password})
        auth_service.update_password(identity, data, db)
    except FormValidationError as e:
        return _password_page(request, template, locale, identity, status_code=422, errors=e.field_errors)
    except AppError as e:
        logger.error("ERROR updating password for %s: %s", identity.email, e.message)
        return _password_page(request, template, locale, identity, status_code=400, message=e.message)
    return RedirectResponse(success_path, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{locale}/reset-password", include_in_schema=False)
def reset_password_page(request: Request, locale: str = Depends(get_locale), identity: Identity = Depends(require_session)):
    return _password_page(request, "reset_password.html", locale, identity)


@router.post("/{locale}/reset-password", include_in_schema=False)
def reset_password_submit(
    request: Request,
    newPassword: str = Form(""),
    confirmPassword: str = Form(""),
    locale: str = Depends(get_locale),
    identity: Identity = Depends(require_session),
    db: BackendService = Depends(get_backend_service),
):
    return _password_submit(
        request, "reset_password.html", locale, identity, db, newPassword, confirmPassword,
        f"{home_path(locale, identity.role.value)}?notice=password_updated",
    )


@router.get("/{locale}/set-password", include_in_schema=False)
def set_password_page(request: Request, locale: str = Depends(get_locale), identity: Identity = Depends(require_session)):
    return _password_page(request, "set_password.html", locale, identity)


@router.post("/{locale}/set-password", include_in_schema=False)
def set_password_submit(
    request: Request,
    newPassword: str = Form(""),
    confirmPassword: str = Form(""),
    locale: str = Depends(get_locale),
    identity: Identity = Depends(require_session),
    db: BackendService = Depends(get_backend_service),
):
    return _password_submit(
        request, "set_password.html", locale, identity, db, newPassword, confirmPassword,
        f"{home_path(locale, identity.role.value)}?notice=welcome",
    )


# --- EMAILED LINK CALLBACK ---

@router.get("/auth/callback", include_in_schema=False)
def auth_callback(
    token: Optional[str] = None,
    next: Optional[str] = None,
    error: Optional[str] = None,
    db: BackendService = Depends(get_backend_service),
):
    if error:
        logger.error("ERROR in auth callback: %s", error)
        return RedirectResponse(f"/{DEFAULT_LOCALE}/login?{urlencode({'error': error})}", status_code=status.HTTP_303_SEE_OTHER)
    if not token:
        return RedirectResponse(f"/{DEFAULT_LOCALE}/login?error=no_code", status_code=status.HTTP_303_SEE_OTHER)

    try:
        access_token, destination = auth_service.exchange_link(token, next, db)
    except AuthenticationError:
        return RedirectResponse("/login?error=invalid_token", status_code=status.HTTP_303_SEE_OTHER)

    response = RedirectResponse(destination, status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, access_token)
    return response


@router.get("/", include_in_schema=False)
def index(identity: Optional[Identity] = Depends(get_current_identity)):
    if identity is None:
        return RedirectResponse(f"/{DEFAULT_LOCALE}/login", status_code=status.HTTP_303_SEE_OTHER)
    return RedirectResponse(home_path(DEFAULT_LOCALE, identity.role.value), status_code=status.HTTP_303_SEE_OTHER)
