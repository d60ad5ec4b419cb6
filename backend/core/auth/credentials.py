"""Credential store: account creation, lookup, and password verification."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from core.auth.errors import DuplicateEmailError, DuplicateUsernameError, StorageUnavailableError
from core.auth.models import Account
from core.auth.validation import normalize_email

if TYPE_CHECKING:
    from core.auth.password import PasswordHasher
    from core.dal.account_repository import AccountRepository

logger = structlog.get_logger()


class CredentialStore:
    """Durable account persistence and credential verification.

    The uniqueness pre-check in ``create`` only produces a friendlier path
    for the common case; the repository's unique constraints decide races
    between concurrent signups.
    """

    def __init__(self, account_repo: AccountRepository, *, password_hasher: PasswordHasher) -> None:
        self._account_repo = account_repo
        self._hasher = password_hasher
        self._dummy_hash: str | None = None

    async def find_by_identifier(self, identifier: str) -> Account | None:
        """Return the account whose username or email matches, or None."""
        if not identifier.strip():
            return None
        return await self._account_repo.get_by_identifier(identifier)

    async def create(self, username: str, email: str, plaintext_password: str) -> Account:
        """Hash the password and persist a new account.

        Raises DuplicateUsernameError or DuplicateEmailError when either
        field collides with an existing account.
        """
        email = normalize_email(email)
        if await self._account_repo.get_by_username(username) is not None:
            raise DuplicateUsernameError
        if await self._account_repo.get_by_email(email) is not None:
            raise DuplicateEmailError

        try:
            password_hash = await self._hasher.hash(plaintext_password)
        except Exception as exc:
            logger.exception("password hashing failed", username=username)
            raise StorageUnavailableError from exc

        account = Account(
            account_id=str(uuid4()),
            username=username,
            email=email,
            password_hash=password_hash,
        )
        await self._account_repo.create_account(account)
        return account

    async def verify_password(self, account: Account, plaintext_password: str) -> bool:
        """Check a plaintext password against the account's stored hash."""
        try:
            return await self._hasher.verify(plaintext_password, account.password_hash)
        except Exception as exc:
            logger.exception("password verification failed", account_id=account.account_id)
            raise StorageUnavailableError from exc

    async def verify_unknown(self, plaintext_password: str) -> bool:
        """Run one verification against a throwaway hash and return False.

        Called when no account matches, so an unknown identifier takes as
        long to reject as a wrong password.
        """
        try:
            if self._dummy_hash is None:
                self._dummy_hash = await self._hasher.hash(secrets.token_urlsafe(16))
            await self._hasher.verify(plaintext_password, self._dummy_hash)
        except Exception as exc:
            logger.exception("password verification failed")
            raise StorageUnavailableError from exc
        return False
