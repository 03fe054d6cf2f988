"""
Request validation - Explicit validators returning a tagged result.

Each validator runs before a workflow starts and returns either
Valid(value) or Invalid(errors). Invalid never reaches the workflow, so
validation failures never touch the rate limiter.

Field errors are keyed by request field with human-readable messages:

    {"email": ["The email field must be a valid email address."]}
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, EmailStr, TypeAdapter, ValidationError

from src.adapters.hashing import MAX_PASSWORD_BYTES
from src.api.models import LoginRequest, RegisterRequest
from src.domain.ports import UserRepository
from src.domain.registration import normalize_email

T = TypeVar("T")

MSG_EMAIL_TAKEN = "The email has already been taken."
MSG_PASSWORD_TOO_LONG = (
    f"The password field must not be greater than {MAX_PASSWORD_BYTES} bytes."
)

_EMAIL = TypeAdapter(EmailStr)

_UNTRIMMED = ("password", "password_confirmation")


@dataclass(frozen=True)
class Valid(Generic[T]):
    """Validation passed; value holds the parsed request."""

    value: T


@dataclass(frozen=True)
class Invalid:
    """Validation failed; errors maps field name to messages."""

    errors: dict[str, list[str]]

    @property
    def message(self) -> str:
        """First error message, with a count of the remaining ones."""
        messages = [m for field_messages in self.errors.values() for m in field_messages]
        remaining = len(messages) - 1
        if remaining == 0:
            return messages[0]
        suffix = "error" if remaining == 1 else "errors"
        return f"{messages[0]} (and {remaining} more {suffix})"


def _label(field: str) -> str:
    return field.replace("_", " ")


def _message_for(field: str, error: dict[str, Any]) -> str:
    label = _label(field)
    kind = error["type"]
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f"The {label} field is required."
    if kind == "string_type":
        return f"The {label} field must be a string."
    if kind == "string_too_short":
        return f"The {label} field must be at least {ctx['min_length']} characters."
    if kind == "string_too_long":
        return f"The {label} field must not be greater than {ctx['max_length']} characters."
    if field == "email":
        return "The email field must be a valid email address."
    return f"The {label} field is invalid."


def _drop_blank(payload: dict[str, Any], fields: tuple[str, ...]) -> dict[str, Any]:
    """
    Keep only known fields, treating null and whitespace-only strings as absent.

    Strings are trimmed, except passwords which are kept verbatim.
    """
    cleaned: dict[str, Any] = {}
    for field in fields:
        value = payload.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        if isinstance(value, str) and field not in _UNTRIMMED:
            value = value.strip()
        cleaned[field] = value
    return cleaned


def _parse(
    model: type[BaseModel], data: dict[str, Any], errors: dict[str, list[str]]
) -> BaseModel | None:
    """Validate data against model, appending field errors on failure."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "body"
            errors.setdefault(field, []).append(_message_for(field, error))
        return None


def _is_registered(email: str, repository: UserRepository) -> bool:
    """Look up the address exactly as it will be stored."""
    return repository.find_by_email(normalize_email(_EMAIL.validate_python(email))) is not None


def validate_registration(
    payload: dict[str, Any], repository: UserRepository
) -> Valid[RegisterRequest] | Invalid:
    """
    Validate a registration request body.

    Rules: name required (max 255); email required, valid and not yet
    registered; password required, min 8 characters, at most 72 bytes
    and equal to password_confirmation; password_confirmation required.

    Args:
        payload: Decoded JSON request body
        repository: Credential store used for the duplicate-email check

    Returns:
        Valid(RegisterRequest) or Invalid(field errors)
    """
    data = _drop_blank(payload, ("name", "email", "password", "password_confirmation"))
    errors: dict[str, list[str]] = {}

    request = _parse(RegisterRequest, data, errors)

    password = data.get("password")
    confirmation = data.get("password_confirmation")
    if isinstance(password, str) and isinstance(confirmation, str) and password != confirmation:
        errors.setdefault("password", []).append(
            "The password field confirmation does not match."
        )

    if isinstance(password, str) and len(password.encode()) > MAX_PASSWORD_BYTES:
        errors.setdefault("password", []).append(MSG_PASSWORD_TOO_LONG)

    if "email" not in errors and _is_registered(data["email"], repository):
        errors.setdefault("email", []).append(MSG_EMAIL_TAKEN)

    if errors:
        return Invalid(errors)
    return Valid(request)


def validate_login(payload: dict[str, Any]) -> Valid[LoginRequest] | Invalid:
    """
    Validate a login request body.

    Rules: email required and valid; password required.
    """
    data = _drop_blank(payload, ("email", "password"))
    errors: dict[str, list[str]] = {}

    request = _parse(LoginRequest, data, errors)

    if errors:
        return Invalid(errors)
    return Valid(request)
