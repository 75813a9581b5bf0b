"""User record validation.

Validation is a pure step that runs before hashing and before anything
touches the store. It reports every violated field at once, keyed by the
dotted field path (``home_location.lat``), so a form can show all problems
in a single round trip.
"""
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from ..schemas.auth import (
    MAX_ADDRESS_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PASSWORD_BYTES,
    MIN_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    UserCreate,
)
from .exceptions import ValidationError

# field path -> (message when missing/blank, message when invalid)
FIELD_MESSAGES: Dict[str, Tuple[str, str]] = {
    "email": ("Email is required", "Please enter a valid email address"),
    "password": (
        "Password is required",
        f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
    ),
    "name": (
        "Name is required",
        f"Name must be at least {MIN_NAME_LENGTH} characters long",
    ),
    "role": ("Role must be one of: user, admin", "Role must be one of: user, admin"),
    "home_location": (
        "Home location must include lat, lng and address",
        "Home location must include lat, lng and address",
    ),
    "home_location.lat": ("Latitude is required", "Latitude must be between -90 and 90"),
    "home_location.lng": ("Longitude is required", "Longitude must be between -180 and 180"),
    "home_location.address": ("Address is required", "Address is required"),
}

# (field path, pydantic error type) -> message, checked before FIELD_MESSAGES
TOO_LONG_MESSAGES: Dict[Tuple[str, str], str] = {
    ("email", "string_too_long"): f"Email must be at most {MAX_EMAIL_LENGTH} characters long",
    ("name", "string_too_long"): f"Name must be at most {MAX_NAME_LENGTH} characters long",
    ("home_location.address", "string_too_long"): (
        f"Address must be at most {MAX_ADDRESS_LENGTH} characters long"
    ),
    ("password", "password_too_long"): (
        f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
    ),
}

# Fields whose values are trimmed, so whitespace alone counts as blank.
TRIMMED_FIELDS = {"email", "name", "home_location.address"}

FIELD_ALIASES = {"homeLocation": "home_location"}


def _is_blank(path: str, error: Mapping[str, Any]) -> bool:
    if error["type"] == "missing":
        return True
    value = error.get("input")
    if value is None or value == "":
        return True
    return path in TRIMMED_FIELDS and isinstance(value, str) and not value.strip()


def _field_path(loc: Tuple[Any, ...]) -> str:
    parts = [FIELD_ALIASES.get(str(part), str(part)) for part in loc]
    return ".".join(parts) or "record"


def _violations_from(exc: PydanticValidationError) -> Dict[str, str]:
    violations: Dict[str, str] = {}
    for error in exc.errors():
        path = _field_path(error["loc"])
        if path in violations:
            continue
        too_long = TOO_LONG_MESSAGES.get((path, error["type"]))
        messages = FIELD_MESSAGES.get(path)
        if too_long is not None:
            violations[path] = too_long
        elif messages is None:
            violations[path] = error["msg"]
        else:
            violations[path] = messages[0] if _is_blank(path, error) else messages[1]
    return violations


def _parse(data: Any) -> Tuple[Optional[UserCreate], Dict[str, str]]:
    if isinstance(data, UserCreate):
        return data, {}
    if not isinstance(data, Mapping):
        return None, {"record": "User record must be an object"}
    try:
        return UserCreate.model_validate(dict(data)), {}
    except PydanticValidationError as e:
        return None, _violations_from(e)


def collect_violations(data: Any) -> Dict[str, str]:
    """Return ``{field: reason}`` for every violation, or ``{}`` if valid."""
    return _parse(data)[1]


def validate_user_record(data: Any) -> UserCreate:
    """Validate and normalize a proposed user record.

    Raises:
        ValidationError: with every violated field.
    """
    record, violations = _parse(data)
    if violations:
        raise ValidationError(violations)
    return record


def validate_password(password: Any) -> None:
    """Apply the registration password rule to a standalone password."""
    if not isinstance(password, str) or not password:
        raise ValidationError({"password": FIELD_MESSAGES["password"][0]})
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": FIELD_MESSAGES["password"][1]})
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError({"password": TOO_LONG_MESSAGES[("password", "password_too_long")]})
