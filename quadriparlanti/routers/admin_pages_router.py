# /quadriparlanti/routers/admin_pages_router.py

"""
Admin pages: teacher management and the pending-review queue.

Every route sits behind `require_admin_page`. Actions that succeed redirect
back to the listing with a `notice` code; actions that fail validation
re-render the listing with the dialog's field messages.
"""

from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from ..core.deps import get_locale, require_admin_page
from ..core.exceptions import AppError, ConflictError, FormValidationError
from ..models.auth_model import Identity
from ..models.review_model import CreateReviewInput, ReviewAction
from ..models.teacher_model import CreateTeacherForm, CreateTeacherInput, TeacherFilters, UpdateTeacherForm, UpdateTeacherInput
from ..models.validation import validate_form
from ..presentation import render
from ..services import review_service, teacher_service
from ..services.database_service import BackendService, get_backend_service

router = APIRouter()


def _redirect(path: str, **params: str) -> RedirectResponse:
    query = f"?{urlencode(params)}" if params else ""
    return RedirectResponse(f"{path}{query}", status_code=status.HTTP_303_SEE_OTHER)


def _teachers_path(locale: str) -> str:
    return f"/{locale}/admin/teachers"


def _pending_path(locale: str) -> str:
    return f"/{locale}/admin/works/pending"


@router.get("/{locale}/admin", include_in_schema=False)
def admin_home(locale: str = Depends(get_locale), admin: Identity = Depends(require_admin_page)):
    return _redirect(_teachers_path(locale))


# --- TEACHER MANAGEMENT ---

def _render_teachers_page(request: Request, locale: str, admin: Identity, db: BackendService, status_code: int = 200, **context):
    try:
        filters = validate_form(TeacherFilters, dict(request.query_params))
    except FormValidationError:
        filters = TeacherFilters()

    try:
        result = teacher_service.get_teachers(filters, admin, db)
        stats = teacher_service.get_teacher_stats(admin, db)
    except AppError as e:
        return render(request, "admin/teachers.html", locale, status_code=500, identity=admin, filters=filters, result=None, stats=None, load_error=e.message)

    context.setdefault("create_form", {"sendInvitation": True})
    context.setdefault("create_errors", {})
    context.setdefault("edit_errors", {})
    return render(
        request, "admin/teachers.html", locale, status_code=status_code,
        identity=admin, filters=filters, result=result, stats=stats,
        notice=request.query_params.get("notice"), error_code=request.query_params.get("error"),
        **context,
    )


@router.get("/{locale}/admin/teachers", include_in_schema=False)
def teachers_page(
    request: Request,
    locale: str = Depends(get_locale),
    admin: Identity = Depends(require_admin_page),
    db: BackendService = Depends(get_backend_service),
):
    return _render_teachers_page(request, locale, admin, db)


@router.post("/{locale}/admin/teachers", include_in_schema=False)
def create_teacher_submit(
    request: Request,
    email: str = Form(""),
    name: str = Form(""),
    bio: str = Form(""),
    password: str = Form(""),
    sendInvitation: Optional[str] = Form(None),
    locale: str = Depends(get_locale),
    admin: Identity = Depends(require_admin_page),
    db: BackendService = Depends(get_backend_service),
):
    # An unchecked checkbox is simply absent from the submitted form.
    form: Dict[str, Any] = {
        "email": email,
        "name": name,
        "bio": bio or None,
        "sendInvitation": sendInvitation is not None,
    }
    try:
        validate_form(CreateTeacherForm, form)
        teacher_data = validate_form(CreateTeacherInput, {**form, "password": password or None})
        teacher_service.create_teacher(teacher_data, admin, db)
    except FormValidationError as e:
        return _render_teachers_page(request, locale, admin, db, status_code=422, create_form=form, create_errors=e.field_errors, open_dialog="create")
    except AppError as e:
        return _render_teachers_page(request, locale, admin, db, status_code=400, create_form=form, create_message=e.message, open_dialog="create")
    return _redirect(_teachers_path(locale), notice="created")


@router.post("/{locale}/admin/teachers/{teacher_id}/edit", include_in_schema=False)
def edit_teacher_submit(
    request: Request,
    teacher_id: str,
    name: str = Form(""),
    bio: str = Form(""),
    profile_image_url: str = Form(""),
    status_value: str = Form("", alias="status"),
    locale: str = Depends(get_locale),
    admin: Identity = Depends(require_admin_page),
    db: BackendService = Depends(get_backend_service),
):
    form = {"name": name, "bio": bio, "profile_image_url": profile_image_url, "status": status_value}
    try:
        checked = validate_form(UpdateTeacherForm, form)
        update_data = UpdateTeacherInput(**checked.model_dump())
        teacher_service.update_teacher(teacher_id, update_data, admin, db)
    except FormValidationError as e:
        return _render_teachers_page(
            request, locale, admin, db, status_code=422,
            edit_teacher_id=teacher_id, edit_form=form, edit_errors=e.field_errors, open_dialog="edit",
        )
    except AppError as e:
        return _redirect(_teachers_path(locale), error=e.message)
    return _redirect(_teachers_path(locale), notice="updated")


@router.post("/{locale}/admin/teachers/{teacher_id}/delete", include_in_schema=False)
def delete_teacher_submit(
    teacher_id: str,
    hard: Optional[str] = Form(None),
    locale: str = Depends(get_locale),
    admin: Identity = Depends(require_admin_page),
    db: BackendService = Depends(get_backend_service),
):
    try:
        teacher_service.delete_teacher(teacher_id, admin, db, hard=hard is not None)
    except ConflictError as e:
        return _redirect(_teachers_path(locale), error=e.code)
    except AppError as e:
        return _redirect(_teachers_path(locale), error=e.message)
    return _redirect(_teachers_path(locale), notice="deleted" if hard is not None else "deactivated")


@router.post("/{locale}/admin/teachers/{teacher_id}/invitation", include_in_schema=False)
def resend_invitation_submit(
    teacher_id: str,
    locale: str = Depends(get_locale),
    admin: Identity = Depends(require_admin_page),
    db: BackendService = Depends(get_backend_service),
):
    try:
        sent = teacher_service.resend_invitation(teacher_id, admin, db)
    except AppError as e:
        return _redirect(_teachers_path(locale), error=e.message)
    return _redirect(_teachers_path(locale), notice="invitation_sent" if sent else "invitation_not_sent")


@router.post("/{locale}/admin/teachers/{teacher_id}/invite-link", include_in_schema=False)
def invite_link_submit(
    request: Request,
    teacher_id: str,
    locale: str = Depends(get_locale),
    admin: Identity = Depends(require_admin_page),
    db: BackendService = Depends(get_backend_service),
):
    try:
        invite = teacher_service.generate_invite_link(teacher_id, admin, db)
    except AppError as e:
        return _redirect(_teachers_path(locale), error=e.message)
    return _render_teachers_page(request, locale, admin, db, invite_link=invite, invite_teacher_id=teacher_id)


@router.post("/{locale}/admin/teachers/{teacher_id}/password-reset", include_in_schema=False)
def reset_password_submit(
    teacher_id: str,
    locale: str = Depends(get_locale),
    admin: Identity = Depends(require_admin_page),
    db: BackendService = Depends(get_backend_service),
):
    try:
        teacher_service.reset_teacher_password(teacher_id, admin, db)
    except AppError as e:
        return _redirect(_teachers_path(locale), error=e.message)
    return _redirect(_teachers_path(locale), notice="password_reset_sent")


# --- PENDING REVIEW QUEUE ---

def _render_pending_page(request: Request, locale: str, admin: Identity, db: BackendService, status_code: int = 200, **context):
    try:
        queue = review_service.get_review_queue(admin, db)
    except AppError as e:
        return render(request, "admin/works_pending.html", locale, status_code=500, identity=admin, works=[], load_error=e.message)
    context.setdefault("reject_errors", {})
    return render(
        request, "admin/works_pending.html", locale, status_code=status_code,
        identity=admin, works=queue.works, notice=request.query_params.get("notice"),
        error_message=request.query_params.get("error"), **context,
    )


@router.get("/{locale}/admin/works/pending", include_in_schema=False)
def pending_works_page(
    request: Request,
    locale: str = Depends(get_locale),
    admin: Identity = Depends(require_admin_page),
    db: BackendService = Depends(get_backend_service),
):
    return _render_pending_page(request, locale, admin, db)


@router.post("/{locale}/admin/works/pending/{work_id}/approve", include_in_schema=False)
def approve_work_submit(
    work_id: str,
    comments: str = Form(""),
    locale: str = Depends(get_locale),
    admin: Identity = Depends(require_admin_page),
    db: BackendService = Depends(get_backend_service),
):
    try:
        review = validate_form(CreateReviewInput, {"work_id": work_id, "action": ReviewAction.APPROVED.value, "comments": comments})
        review_service.approve_work(review, admin, db)
    except AppError as e:
        message = e.first_message if isinstance(e, FormValidationError) else e.message
        return _redirect(_pending_path(locale), error=message)
    return _redirect(_pending_path(locale), notice="approved")


@router.post("/{locale}/admin/works/pending/{work_id}/reject", include_in_schema=False)
def reject_work_submit(
    request: Request,
    work_id: str,
    comments: str = Form(""),
    locale: str = Depends(get_locale),
    admin: Identity = Depends(require_admin_page),
    db: BackendService = Depends(get_backend_service),
):
    try:
        review = validate_form(CreateReviewInput, {"work_id": work_id, "action": ReviewAction.REJECTED.value, "comments": comments})
        review_service.reject_work(review, admin, db)
    except FormValidationError as e:
        return _render_pending_page(
            request, locale, admin, db, status_code=422,
            reject_work_id=work_id, reject_comments=comments, reject_errors=e.field_errors,
        )
    except AppError as e:
        return _redirect(_pending_path(locale), error=e.message)
    return _redirect(_pending_path(locale), notice="rejected")
