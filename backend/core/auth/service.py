"""Auth service coordinating signup, login, and session management."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from core.auth.errors import AuthenticationError, FormValidationError
from core.auth.validation import validate_signup

if TYPE_CHECKING:
    from core.auth.credentials import CredentialStore
    from core.auth.models import AuthSession
    from core.auth.session_store import SessionStore

logger = structlog.get_logger()


class AuthService:
    """Coordinate account signup, login, and session validation."""

    def __init__(self, credential_store: CredentialStore, session_store: SessionStore) -> None:
        self._credentials = credential_store
        self._sessions = session_store

    async def signup(self, username: str, email: str, password: str, confirm_password: str) -> AuthSession:
        """Validate input, create the account, and log it in."""
        form = validate_signup(username, email, password, confirm_password)
        account = await self._credentials.create(form.username, form.email, form.password)
        logger.info("account created", account_id=account.account_id, username=account.username)
        return self._sessions.issue(account.account_id, account.username, account.email)

    async def login(self, identifier: str, password: str) -> AuthSession:
        """Verify credentials for a username or email and issue a session."""
        identifier = identifier.strip()
        if not identifier:
            raise FormValidationError("Username or email is required")
        if not password:
            raise FormValidationError("Password is required")

        account = await self._credentials.find_by_identifier(identifier)
        if account is None:
            verified = await self._credentials.verify_unknown(password)
        else:
            verified = await self._credentials.verify_password(account, password)
        if account is None or not verified:
            logger.info("login rejected", identifier=identifier)
            raise AuthenticationError

        logger.info("login succeeded", account_id=account.account_id, username=account.username)
        return self._sessions.issue(account.account_id, account.username, account.email)

    def validate_session(self, session_id: str | None) -> AuthSession | None:
        """Return the session if active, otherwise None."""
        return self._sessions.validate(session_id)

    def logout(self, session_id: str) -> None:
        """Destroy a session. Unknown or expired references are ignored."""
        session = self._sessions.validate(session_id)
        self._sessions.destroy(session_id)
        if session is not None:
            logger.info("logged out", account_id=session.account_id, username=session.username)
