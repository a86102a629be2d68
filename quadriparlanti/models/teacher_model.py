# /quadriparlanti/models/teacher_model.py

"""
Data contracts for teacher management: the admin dialog forms, the inputs the
teacher actions accept, and the response shapes they return.
"""

from datetime import datetime
from enum import Enum
from typing import ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .validation import check_bio, check_choice, check_email, check_length, check_name, check_url, field_error


class UserRole(str, Enum):
    ADMIN = "admin"
    TEACHER = "docente"
    STUDENT = "studente"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    INVITED = "invited"


# 'invited' is reached only through creation and left only by setting a password.
EDITABLE_STATUSES = ("active", "inactive", "suspended")
ASSIGNABLE_ROLES = ("docente", "admin")


# --- Form schemas (admin dialogs) ---

class CreateTeacherForm(BaseModel):
    """Fields of the "new teacher" dialog."""
    required_messages: ClassVar[Dict[str, str]] = {
        "email": "Email richiesta",
        "name": "Nome deve avere almeno 2 caratteri",
    }

    email: str
    name: str
    bio: Optional[str] = None
    sendInvitation: bool = True

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return check_email(value)

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return check_name(value)

    @field_validator("bio")
    @classmethod
    def _bio(cls, value: Optional[str]) -> Optional[str]:
        return check_bio(value)


class UpdateTeacherForm(BaseModel):
    """Fields of the "edit teacher" dialog; name and status are always sent."""
    required_messages: ClassVar[Dict[str, str]] = {
        "name": "Nome deve avere almeno 2 caratteri",
        "status": "Stato non valido",
    }

    name: str
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    status: UserStatus

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return check_name(value)

    @field_validator("bio")
    @classmethod
    def _bio(cls, value: Optional[str]) -> Optional[str]:
        return check_bio(value)

    @field_validator("profile_image_url")
    @classmethod
    def _image(cls, value: Optional[str]) -> Optional[str]:
        return check_url(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value):
        return check_choice(value, EDITABLE_STATUSES, "Stato non valido")


# --- Action inputs ---

class CreateTeacherInput(CreateTeacherForm):
    """
    Server-side create input. A manual password is only needed when no
    invitation is sent, since the teacher cannot pick one themselves.
    """
    password: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("bio")
    @classmethod
    def _bio(cls, value: Optional[str]) -> Optional[str]:
        return check_bio(value, "Biografia deve avere massimo 500 caratteri")

    @field_validator("password")
    @classmethod
    def _password(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if not value:
            if info.data.get("sendInvitation") is False:
                raise field_error("Password richiesta quando non si invia un invito")
            return None
        return check_length(value, 8, None, "Password deve avere almeno 8 caratteri")


class UpdateTeacherInput(BaseModel):
    """Partial update: only the fields present in the payload are written."""
    name: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    status: Optional[UserStatus] = None
    role: Optional[UserRole] = None

    @field_validator("name")
    @classmethod
    def _name(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else check_name(value)

    @field_validator("bio")
    @classmethod
    def _bio(cls, value: Optional[str]) -> Optional[str]:
        return check_bio(value, "Biografia deve avere massimo 500 caratteri")

    @field_validator("profile_image_url")
    @classmethod
    def _image(cls, value: Optional[str]) -> Optional[str]:
        return check_url(value, "URL immagine non valido")

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value):
        return None if value is None else check_choice(value, EDITABLE_STATUSES, "Status non valido")

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, value):
        return None if value is None else check_choice(value, ASSIGNABLE_ROLES, "Ruolo non valido")


class TeacherFilters(BaseModel):
    """A page request over the teacher list. Built per request, never stored."""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    search: Optional[str] = None
    status: Optional[UserStatus] = None

    @field_validator("search")
    @classmethod
    def _search(cls, value: Optional[str]) -> Optional[str]:
        value = (value or "").strip()
        return value or None


# --- Response shapes ---

class Teacher(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: Optional[str] = None
    role: UserRole
    status: UserStatus
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
    storage_used_mb: float = 0


class PaginatedTeachersResponse(BaseModel):
    teachers: List[Teacher]
    total: int = Field(..., ge=0)
    page: int
    limit: int
    totalPages: int = Field(..., ge=0)


class TeacherStats(BaseModel):
    total: int = Field(..., ge=0, description="Number of teacher accounts, whatever their status.")
    active: int = Field(..., ge=0)
    inactive: int = Field(..., ge=0)
    suspended: int = Field(..., ge=0)
    invited: int = Field(..., ge=0)


class InviteLinkResponse(BaseModel):
    link: str
    link_type: str
