# /quadriparlanti/models/auth_model.py

from typing import ClassVar, Dict, Optional

from pydantic import BaseModel, ValidationInfo, field_validator

from .teacher_model import Teacher, UserRole, UserStatus
from .validation import check_email, check_length, field_error


class Identity(BaseModel):
    """The authenticated caller, as resolved by the session gate."""
    id: str
    email: str
    role: UserRole
    status: UserStatus
    name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN and self.status == UserStatus.ACTIVE


class LoginInput(BaseModel):
    required_messages: ClassVar[Dict[str, str]] = {
        "email": "Email non valida",
        "password": "La password è obbligatoria",
    }

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return check_email(value, required_message="Email non valida")

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        return check_length(value, 1, None, "La password è obbligatoria")


class ResetPasswordInput(BaseModel):
    required_messages: ClassVar[Dict[str, str]] = {"email": "Email non valida"}

    email: str

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return check_email(value, required_message="Email non valida")


class SetPasswordInput(BaseModel):
    required_messages: ClassVar[Dict[str, str]] = {
        "newPassword": "La password deve avere almeno 8 caratteri",
        "confirmPassword": "Conferma la nuova password",
    }

    newPassword: str
    confirmPassword: str

    @field_validator("newPassword")
    @classmethod
    def _new_password(cls, value: str) -> str:
        return check_length(value, 8, None, "La password deve avere almeno 8 caratteri")

    @field_validator("confirmPassword")
    @classmethod
    def _confirm_password(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise field_error("Conferma la nuova password")
        new_password = info.data.get("newPassword")
        if new_password is not None and value != new_password:
            raise field_error("Le password non corrispondono")
        return value


class LoginResult(BaseModel):
    role: UserRole
    access_token: str
    token_type: str = "bearer"


class CurrentUser(BaseModel):
    id: str
    email: str
    profile: Teacher


class MessageResponse(BaseModel):
    message: str
