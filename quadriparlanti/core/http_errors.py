# /quadriparlanti/core/http_errors.py

from fastapi import HTTPException, status

from .exceptions import (
    AppError,
    AuthenticationError,
    ConflictError,
    FormValidationError,
    NotFoundError,
    PermissionDenied,
)


def to_http_exception(error: AppError) -> HTTPException:
    """Translates a service-layer error into the HTTP error the API returns."""
    if isinstance(error, FormValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": error.first_message, "errors": error.field_errors},
        )
    if isinstance(error, AuthenticationError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=error.message)
    if isinstance(error, PermissionDenied):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error.message)
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    if isinstance(error, ConflictError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": error.message, "code": error.code},
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.message)
