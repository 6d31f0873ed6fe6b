# validators.py
from __future__ import annotations
import re
import uuid
from typing import Iterable, Optional, Tuple

# Instance and host names: alphanumeric at both ends, hyphens inside.
NAME_PATTERN = r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?$"
# Guest OS account names.
USERNAME_PATTERN = r"^[a-zA-Z][a-zA-Z0-9_-]*$"
# Console login names also allow dots.
LOGIN_PATTERN = r"^[a-zA-Z][a-zA-Z0-9._-]*$"


def validate_required(value: str, label: str, message: str = "") -> Tuple[bool, str]:
    if value is None or value == "":
        return False, message or f"{label} is required"
    return True, ""


def validate_length(
    value: str, label: str, min_len: int = 0, max_len: Optional[int] = None
) -> Tuple[bool, str]:
    if len(value) < min_len:
        return False, f"{label} must be at least {min_len} characters"
    if max_len is not None and len(value) > max_len:
        return False, f"{label} too long"
    return True, ""


def validate_pattern(value: str, pattern: str, message: str) -> Tuple[bool, str]:
    if re.fullmatch(pattern, value) is None:
        return False, message
    return True, ""


def validate_choice(value: str, choices: Iterable[str], label: str) -> Tuple[bool, str]:
    if value not in set(choices):
        return False, f"'{value}' is not an available {label.lower()}."
    return True, ""


def validate_uuid(value: str, label: str) -> Tuple[bool, str]:
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False, f"Invalid {label} format"
    return True, ""


def validate_vm_name(name: str) -> Tuple[bool, str]:
    ok, msg = validate_required(name, "VM name")
    if not ok:
        return ok, msg
    ok, msg = validate_length(name, "VM name", max_len=63)
    if not ok:
        return ok, msg
    return validate_pattern(
        name, NAME_PATTERN,
        "VM name must start and end with alphanumeric characters",
    )


def validate_admin_username(username: str) -> Tuple[bool, str]:
    ok, msg = validate_required(username, "Admin username")
    if not ok:
        return ok, msg
    ok, msg = validate_length(username, "Username", max_len=32)
    if not ok:
        return ok, msg
    return validate_pattern(
        username, USERNAME_PATTERN,
        "Username must start with a letter and contain only alphanumeric, "
        "underscore, or hyphen",
    )


def validate_admin_password(password: str) -> Tuple[bool, str]:
    return validate_length(password, "Password", min_len=8, max_len=72)
