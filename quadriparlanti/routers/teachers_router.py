# /quadriparlanti/routers/teachers_router.py

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from fastapi.responses import StreamingResponse

from ..core.deps import require_api_admin
from ..core.exceptions import AppError
from ..core.http_errors import to_http_exception
from ..models.auth_model import Identity, MessageResponse
from ..models.teacher_model import (
    CreateTeacherInput,
    InviteLinkResponse,
    PaginatedTeachersResponse,
    Teacher,
    TeacherFilters,
    TeacherStats,
    UpdateTeacherInput,
)
from ..models.validation import validate_form
from ..services import teacher_service
from ..services.database_service import BackendService, get_backend_service

router = APIRouter()

# --- TEACHER COLLECTION ENDPOINTS (/api/teachers) ---

@router.get("", response_model=PaginatedTeachersResponse, summary="List Teachers (Paginated)")
def list_teachers(request: Request, admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        filters = validate_form(TeacherFilters, dict(request.query_params))
        return teacher_service.get_teachers(filters, admin, db)
    except AppError as e:
        raise to_http_exception(e)

@router.post("", response_model=Teacher, status_code=status.HTTP_201_CREATED, summary="Create a Teacher")
def create_teacher(payload: Dict[str, Any] = Body(...), admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        teacher_data = validate_form(CreateTeacherInput, payload)
        return teacher_service.create_teacher(teacher_data, admin, db)
    except AppError as e:
        raise to_http_exception(e)

@router.get("/stats", response_model=TeacherStats, summary="Get Teacher Counts per Status")
def get_teacher_stats(admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        return teacher_service.get_teacher_stats(admin, db)
    except AppError as e:
        raise to_http_exception(e)

@router.get("/export", summary="Export Teachers as CSV", response_class=StreamingResponse)
def export_teachers_csv(status_filter: Optional[str] = Query(None, alias="status"), admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        csv_string = teacher_service.export_teachers_csv(admin, db, status=status_filter)
    except AppError as e:
        raise to_http_exception(e)
    return StreamingResponse(iter([csv_string]), media_type="text/csv", headers={"Content-Disposition": "attachment; filename=docenti.csv"})

# --- INDIVIDUAL TEACHER ENDPOINTS (/api/teachers/{teacher_id}) ---

@router.get("/{teacher_id}", response_model=Teacher, summary="Get a Single Teacher")
def get_teacher(teacher_id: str, admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        return teacher_service.get_teacher(teacher_id, admin, db)
    except AppError as e:
        raise to_http_exception(e)

@router.patch("/{teacher_id}", response_model=Teacher, summary="Update a Teacher")
def update_teacher(teacher_id: str, payload: Dict[str, Any] = Body(...), admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        update_data = validate_form(UpdateTeacherInput, payload)
        return teacher_service.update_teacher(teacher_id, update_data, admin, db)
    except AppError as e:
        raise to_http_exception(e)

@router.delete("/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Deactivate or Delete a Teacher")
def delete_teacher(teacher_id: str, hard: bool = False, admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        teacher_service.delete_teacher(teacher_id, admin, db, hard=hard)
    except AppError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{teacher_id}/invitation", response_model=MessageResponse, summary="Resend the Invitation Email")
def resend_invitation(teacher_id: str, admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        sent = teacher_service.resend_invitation(teacher_id, admin, db)
    except AppError as e:
        raise to_http_exception(e)
    if sent:
        return MessageResponse(message="Invito inviato")
    return MessageResponse(message="Email non inviata: genera un link di invito e condividilo manualmente")

@router.post("/{teacher_id}/invite-link", response_model=InviteLinkResponse, summary="Generate an Invite or Magic Link")
def generate_invite_link(teacher_id: str, admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        return teacher_service.generate_invite_link(teacher_id, admin, db)
    except AppError as e:
        raise to_http_exception(e)

@router.post("/{teacher_id}/password-reset", response_model=MessageResponse, summary="Send a Password Reset Email to a Teacher")
def reset_teacher_password(teacher_id: str, admin: Identity = Depends(require_api_admin), db: BackendService = Depends(get_backend_service)):
    try:
        teacher_service.reset_teacher_password(teacher_id, admin, db)
    except AppError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Email di reset inviata")
