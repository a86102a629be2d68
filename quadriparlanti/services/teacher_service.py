# /quadriparlanti/services/teacher_service.py

"""
Business logic for teacher management, reserved to active admins.

Every action starts with the admin check, then reads and writes through the
`BackendService` facade. Store failures surface as `BackendError` carrying a
generic Italian message; the underlying cause is logged, never returned.
Creating a teacher touches two stores (the auth account and the profile row),
so a failed profile insert deletes the auth account it just created.
"""

import logging
import math
from typing import Optional

import pandas as pd

from ..core import security
from ..core.exceptions import BackendError, ConflictError, NotFoundError
from ..db.models.user_model import User
from ..models.auth_model import Identity
from ..models.teacher_model import (
    CreateTeacherInput,
    InviteLinkResponse,
    PaginatedTeachersResponse,
    Teacher,
    TeacherFilters,
    TeacherStats,
    UpdateTeacherInput,
    UserRole,
    UserStatus,
)
from .auth_service import require_admin
from .database_service import BackendService

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Docente non trovato"
CREATE_ERROR = "Errore durante la creazione del docente"
LIST_ERROR = "Errore durante il recupero dei docenti"
UPDATE_ERROR = "Errore durante l'aggiornamento del docente"
DELETE_ERROR = "Errore durante l'eliminazione del docente"
INVITE_ERROR = "Errore durante l'invio dell'invito"
RESET_ERROR = "Errore durante il reset della password"
STATS_ERROR = "Errore durante il recupero delle statistiche"
AUTH_USER_ERROR = "Errore nel recupero dei dati utente"

EXPORT_COLUMNS = ["Nome", "Email", "Stato", "Creato il", "Ultimo accesso"]


def _load_teacher(teacher_id: str, db: BackendService) -> User:
    teacher = db.get_teacher_by_id(teacher_id)
    if not teacher:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return teacher


def _locale_path(db: BackendService, path: str) -> str:
    return f"/{db.settings.default_locale}/{path}"


# --- CREATE ---

def create_teacher(teacher_data: CreateTeacherInput, actor: Identity, db: BackendService) -> Teacher:
    """
    Creates the auth account and the teacher profile, then optionally emails
    an invitation. An email that cannot be sent does not undo the creation.
    """
    require_admin(actor)
    email = teacher_data.email.lower()

    if db.get_user_by_email(email):
        raise ConflictError("Email già in uso", code="EMAIL_IN_USE")

    # Invited teachers choose their own password; the random one is never shown.
    password = teacher_data.password or security.generate_random_password()
    try:
        account = db.auth.admin_create_user(
            email=email,
            password=password,
            email_confirm=not teacher_data.sendInvitation,
            user_metadata={"name": teacher_data.name, "role": UserRole.TEACHER.value},
        )
    except BackendError as e:
        logger.error("ERROR creating auth account for %s: %s", email, e)
        raise BackendError(CREATE_ERROR) from e

    try:
        profile = db.create_user_record({
            "id": account.id,
            "email": email,
            "name": teacher_data.name,
            "role": UserRole.TEACHER.value,
            "status": UserStatus.INVITED.value if teacher_data.sendInvitation else UserStatus.ACTIVE.value,
            "bio": teacher_data.bio or None,
        })
    except BackendError as e:
        logger.error("ERROR creating teacher profile for %s: %s", email, e)
        try:
            db.auth.admin_delete_user(account.id)
        except BackendError as cleanup_error:
            logger.error("ERROR removing orphan auth account %s: %s", account.id, cleanup_error)
        raise BackendError(CREATE_ERROR) from e

    if teacher_data.sendInvitation:
        try:
            sent = db.auth.admin_invite_user_by_email(email, redirect_to=_locale_path(db, "set-password"), name=teacher_data.name)
            if not sent:
                logger.warning("Invitation email for %s was not delivered; use the invite link instead.", email)
        except BackendError as e:
            logger.error("ERROR sending invitation to %s: %s", email, e)

    logger.info("Teacher %s created by %s", profile.id, actor.email)
    return Teacher.model_validate(profile)


# --- READ ---

def get_teachers(filters: TeacherFilters, actor: Identity, db: BackendService) -> PaginatedTeachersResponse:
    require_admin(actor)
    offset = (filters.page - 1) * filters.limit
    status = filters.status.value if filters.status else None
    try:
        rows, total = db.list_teacher_records(offset=offset, limit=filters.limit, status=status, search=filters.search)
    except BackendError as e:
        logger.error("ERROR listing teachers: %s", e)
        raise BackendError(LIST_ERROR) from e

    return PaginatedTeachersResponse(
        teachers=[Teacher.model_validate(row) for row in rows],
        total=total,
        page=filters.page,
        limit=filters.limit,
        totalPages=math.ceil(total / filters.limit),
    )


def get_teacher(teacher_id: str, actor: Identity, db: BackendService) -> Teacher:
    require_admin(actor)
    return Teacher.model_validate(_load_teacher(teacher_id, db))


def get_teacher_stats(actor: Identity, db: BackendService) -> TeacherStats:
    require_admin(actor)
    try:
        counts = db.get_teacher_status_counts()
    except BackendError as e:
        logger.error("ERROR computing teacher statistics: %s", e)
        raise BackendError(STATS_ERROR) from e

    by_status = {status.value: counts.get(status.value, 0) for status in UserStatus}
    return TeacherStats(total=sum(counts.values()), **by_status)


# --- UPDATE ---

def update_teacher(teacher_id: str, update_data: UpdateTeacherInput, actor: Identity, db: BackendService) -> Teacher:
    """Writes only the fields present in the input; an empty input is a no-op."""
    require_admin(actor)
    existing = _load_teacher(teacher_id, db)

    changes = update_data.model_dump(exclude_unset=True, mode="json")
    if "profile_image_url" in changes and not changes["profile_image_url"]:
        changes["profile_image_url"] = None
    if not changes:
        return Teacher.model_validate(existing)

    try:
        updated = db.update_user_record(teacher_id, changes)
    except BackendError as e:
        logger.error("ERROR updating teacher %s: %s", teacher_id, e)
        raise BackendError(UPDATE_ERROR) from e
    return Teacher.model_validate(updated)


# --- DELETE ---

def delete_teacher(teacher_id: str, actor: Identity, db: BackendService, hard: bool = False) -> None:
    """
    Soft delete marks the teacher inactive. Hard delete removes the profile
    and the auth account, and is refused while the teacher still owns works.
    """
    require_admin(actor)
    _load_teacher(teacher_id, db)

    if not hard:
        try:
            db.update_user_record(teacher_id, {"status": UserStatus.INACTIVE.value})
        except BackendError as e:
            logger.error("ERROR deactivating teacher %s: %s", teacher_id, e)
            raise BackendError(DELETE_ERROR) from e
        return

    if db.teacher_has_works(teacher_id):
        raise ConflictError("Il docente ha lavori associati e non può essere eliminato", code="HAS_WORKS")

    try:
        db.delete_user_record(teacher_id)
        db.auth.admin_delete_user(teacher_id)
    except BackendError as e:
        logger.error("ERROR deleting teacher %s: %s", teacher_id, e)
        raise BackendError(DELETE_ERROR) from e
    logger.info("Teacher %s permanently deleted by %s", teacher_id, actor.email)


# --- INVITATIONS & PASSWORDS ---

def resend_invitation(teacher_id: str, actor: Identity, db: BackendService) -> bool:
    """Returns whether the invitation email was actually delivered."""
    require_admin(actor)
    teacher = _load_teacher(teacher_id, db)
    try:
        return db.auth.admin_invite_user_by_email(teacher.email, redirect_to=_locale_path(db, "set-password"), name=teacher.name)
    except BackendError as e:
        logger.error("ERROR resending invitation to %s: %s", teacher.email, e)
        raise BackendError(INVITE_ERROR) from e


def generate_invite_link(teacher_id: str, actor: Identity, db: BackendService) -> InviteLinkResponse:
    """
    Builds a link the admin can hand over directly. Teachers who never
    confirmed their email get an invite link; the others get a magic link.
    """
    require_admin(actor)
    teacher = _load_teacher(teacher_id, db)

    account = db.auth.admin_get_user_by_id(teacher_id)
    if not account:
        logger.error("ERROR no auth account for teacher %s", teacher_id)
        raise BackendError(AUTH_USER_ERROR)

    link_type = "magiclink" if account.email_confirmed_at else "invite"
    redirect_to = _locale_path(db, "teacher") if link_type == "magiclink" else _locale_path(db, "set-password")
    logger.info("Generating %s link for teacher %s", link_type, teacher_id)
    try:
        link = db.auth.admin_generate_link(link_type, teacher.email, redirect_to=redirect_to)
    except BackendError as e:
        logger.error("ERROR generating %s link for %s: %s", link_type, teacher_id, e)
        raise BackendError(f"Errore durante la generazione del link ({link_type})") from e
    return InviteLinkResponse(link=link, link_type=link_type)


def reset_teacher_password(teacher_id: str, actor: Identity, db: BackendService) -> None:
    require_admin(actor)
    teacher = _load_teacher(teacher_id, db)
    try:
        db.auth.reset_password_for_email(teacher.email, redirect_to=_locale_path(db, "reset-password"))
    except BackendError as e:
        logger.error("ERROR sending password reset to %s: %s", teacher.email, e)
        raise BackendError(RESET_ERROR) from e


# --- EXPORT ---

def export_teachers_csv(actor: Identity, db: BackendService, status: Optional[str] = None) -> str:
    """Generates a CSV of every teacher, optionally limited to one status."""
    require_admin(actor)
    teachers = [t for t in db.get_all_teachers() if status is None or t.status == status]

    export_data = [
        {
            "Nome": t.name or "",
            "Email": t.email,
            "Stato": t.status,
            "Creato il": t.created_at.strftime("%Y-%m-%d") if t.created_at else "",
            "Ultimo accesso": t.last_login_at.strftime("%Y-%m-%d %H:%M") if t.last_login_at else "Mai",
        } for t in teachers
    ]

    df = pd.DataFrame(export_data) if export_data else pd.DataFrame(columns=EXPORT_COLUMNS)
    return df.to_csv(index=False)
