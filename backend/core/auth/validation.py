"""Signup field validation.

Rules are checked in a fixed order and the first violation is reported, so
the user always sees one actionable message. These checks run server-side
regardless of any client-side pre-check.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import EmailStr, TypeAdapter, ValidationError

from core.auth.errors import FormValidationError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9]+$")

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72  # bcrypt truncates at 72 bytes
_UPPERCASE_PATTERN = re.compile(r"[A-Z]")
_DIGIT_PATTERN = re.compile(r"[0-9]")

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)


@dataclass(frozen=True)
class SignupForm:
    """Validated, normalized signup input."""

    username: str
    email: str
    password: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_username(username: str) -> str:
    """Return the trimmed username or raise FormValidationError."""
    username = username.strip()
    if len(username) < USERNAME_MIN_LENGTH or len(username) > USERNAME_MAX_LENGTH:
        raise FormValidationError(f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters")
    if not USERNAME_PATTERN.match(username):
        raise FormValidationError("Username must be alphanumeric")
    return username


def validate_email(email: str) -> str:
    """Return the normalized email or raise FormValidationError."""
    candidate = normalize_email(email)
    # EmailStr also accepts "Name <addr>"; only a bare address is allowed.
    if "<" in candidate or ">" in candidate:
        raise FormValidationError("Please provide a valid email")
    try:
        _email_adapter.validate_python(candidate)
    except ValidationError as exc:
        raise FormValidationError("Please provide a valid email") from exc
    return candidate


def validate_password(password: str, confirm_password: str) -> str:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise FormValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise FormValidationError(f"Password must not exceed {PASSWORD_MAX_BYTES} bytes")
    if not _UPPERCASE_PATTERN.search(password):
        raise FormValidationError("Password must contain at least one uppercase letter")
    if not _DIGIT_PATTERN.search(password):
        raise FormValidationError("Password must contain at least one number")
    if password != confirm_password:
        raise FormValidationError("Passwords do not match")
    return password


def validate_signup(username: str, email: str, password: str, confirm_password: str) -> SignupForm:
    """Validate all signup fields in order and return the normalized form."""
    return SignupForm(
        username=validate_username(username),
        email=validate_email(email),
        password=validate_password(password, confirm_password),
    )
