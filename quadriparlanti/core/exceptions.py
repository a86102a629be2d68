# /quadriparlanti/core/exceptions.py

"""
The error taxonomy shared by the service layer and the routers.

Services raise these exceptions; routers translate them into HTTP responses
and page handlers translate them into redirects or inline messages.
"""

from typing import Dict, List, Optional


class AppError(Exception):
    """Base class for every business error raised by the services."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(AppError):
    """A required environment variable is missing."""


class SessionRedirect(AppError):
    """
    Raised by the page-level session gate. Carries the location the browser
    must be sent to; it never reaches the user as an error.
    """

    def __init__(self, location: str):
        super().__init__(f"Redirect to {location}")
        self.location = location


class AuthenticationError(AppError):
    """No valid identity (missing, expired or invalid token, bad credentials)."""


class PermissionDenied(AppError):
    def __init__(self, message: str = "Permessi insufficienti"):
        super().__init__(message)


class NotFoundError(AppError):
    pass


class ConflictError(AppError):
    """
    The operation conflicts with existing data. `code` is a stable,
    machine-readable value (e.g. HAS_WORKS) for clients that branch on it.
    """

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code or message


class BackendError(AppError):
    """A call to the backend store or auth provider failed."""


class FormValidationError(AppError):
    """
    Aggregated validation failure: one entry per invalid field, each holding
    the localized messages for that field.
    """

    def __init__(self, field_errors: Dict[str, List[str]], message: str = "Dati non validi"):
        super().__init__(message)
        self.field_errors = field_errors

    @property
    def first_message(self) -> str:
        for messages in self.field_errors.values():
            if messages:
                return messages[0]
        return self.message


class LocaleNotFoundError(AppError):
    def __init__(self, locale: str):
        super().__init__(f"Unsupported locale: {locale}")
        self.locale = locale
