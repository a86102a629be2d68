# /quadriparlanti/routers/teacher_pages_router.py

from fastapi import APIRouter, Depends, Request

from ..core.deps import get_locale, require_teacher_page
from ..core.exceptions import AppError
from ..models.auth_model import Identity
from ..presentation import render
from ..services import review_service
from ..services.database_service import BackendService, get_backend_service

router = APIRouter()


@router.get("/{locale}/teacher", include_in_schema=False)
def teacher_dashboard(
    request: Request,
    locale: str = Depends(get_locale),
    identity: Identity = Depends(require_teacher_page),
    db: BackendService = Depends(get_backend_service),
):
    """The signed-in user's own works with their links and latest review feedback."""
    try:
        entries = review_service.get_own_works(identity, db)
    except AppError as e:
        return render(request, "teacher/dashboard.html", locale, status_code=500, identity=identity, entries=[], load_error=e.message)
    return render(
        request, "teacher/dashboard.html", locale,
        identity=identity, entries=entries, notice=request.query_params.get("notice"),
    )
