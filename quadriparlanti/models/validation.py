# /quadriparlanti/models/validation.py

"""
Shared field checks and the bridge from Pydantic's ValidationError to the
application's FormValidationError.

Each check enforces its constraints in order and raises on the first failure,
so a field contributes exactly one message. Pydantic itself collects the
failures of all fields into one ValidationError, which `validate_form` turns
into a `{field: [message]}` mapping.
"""

from typing import Any, Dict, List, Optional, Type, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyUrl, BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticCustomError

from ..core.exceptions import FormValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

REQUIRED_MESSAGE = "Campo obbligatorio"
INVALID_MESSAGE = "Valore non valido"

_url_adapter = TypeAdapter(AnyUrl)


def field_error(message: str) -> PydanticCustomError:
    return PydanticCustomError("field_error", message)


def check_email(value: str, required_message: str = "Email richiesta", invalid_message: str = "Email non valida") -> str:
    value = (value or "").strip()
    if not value:
        raise field_error(required_message)
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise field_error(invalid_message)
    return value


def check_length(value: str, min_length: Optional[int], max_length: Optional[int], min_message: str = "", max_message: str = "") -> str:
    if min_length is not None and len(value) < min_length:
        raise field_error(min_message)
    if max_length is not None and len(value) > max_length:
        raise field_error(max_message)
    return value


def check_name(value: str) -> str:
    return check_length(
        value, 2, 100,
        "Nome deve avere almeno 2 caratteri",
        "Nome deve avere massimo 100 caratteri",
    )


def check_bio(value: Optional[str], max_message: str = "Bio deve avere massimo 500 caratteri") -> Optional[str]:
    if value is None:
        return None
    return check_length(value, None, 500, max_message=max_message)


def check_url(value: Optional[str], message: str = "URL non valido") -> Optional[str]:
    # Empty string is an explicit "clear the image" from the edit form.
    if not value:
        return value
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise field_error(message)
    return value


def check_choice(value: Any, choices, message: str) -> Any:
    raw = getattr(value, "value", value)
    if raw not in choices:
        raise field_error(message)
    return raw


def collect_field_errors(exc: ValidationError, model_cls: Optional[Type[BaseModel]] = None) -> Dict[str, List[str]]:
    """
    Groups Pydantic errors by top-level field. Our own checks already carry
    Italian messages; built-in errors are mapped to the model's
    `required_messages` or to a generic message.
    """
    required_messages = getattr(model_cls, "required_messages", {}) if model_cls else {}
    field_errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error.get("loc") else "__root__"
        if error["type"] == "field_error":
            message = error["msg"]
        elif error["type"] == "missing":
            message = required_messages.get(field, REQUIRED_MESSAGE)
        else:
            message = INVALID_MESSAGE
        messages = field_errors.setdefault(field, [])
        if message not in messages:
            messages.append(message)
    return field_errors


def validate_form(model_cls: Type[ModelT], data: Any) -> ModelT:
    """Validates untyped input or raises FormValidationError with every field error."""
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise FormValidationError(collect_field_errors(exc, model_cls)) from exc
