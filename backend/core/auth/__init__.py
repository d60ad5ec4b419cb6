"""Credential store, session store, and the auth service built on them."""

from core.auth.credentials import CredentialStore
from core.auth.errors import (
    AuthenticationError,
    AuthError,
    ConflictError,
    DuplicateEmailError,
    DuplicateUsernameError,
    FormValidationError,
    StorageUnavailableError,
)
from core.auth.models import Account, AuthSession
from core.auth.password import get_hasher
from core.auth.service import AuthService
from core.auth.session_store import SessionStore
from core.auth.settings import AuthSettings

__all__ = [
    "Account",
    "AuthError",
    "AuthService",
    "AuthSession",
    "AuthSettings",
    "AuthenticationError",
    "ConflictError",
    "CredentialStore",
    "DuplicateEmailError",
    "DuplicateUsernameError",
    "FormValidationError",
    "SessionStore",
    "StorageUnavailableError",
    "get_hasher",
]
