"""SQLite-backed account repository."""

from __future__ import annotations

import asyncio
import sqlite3
from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from core.auth.errors import DuplicateEmailError, DuplicateUsernameError, StorageUnavailableError
from core.auth.models import Account
from core.auth.validation import normalize_email
from core.dal.account_repository import AccountRepository

if TYPE_CHECKING:
    from core.db.connection import Database

logger = structlog.get_logger()

_SELECT_COLUMNS = "SELECT id, username, email, password_hash, created_at FROM accounts"


def _row_to_account(row: tuple[str, str, str, str, str]) -> Account:
    account_id, username, email, password_hash, created_at = row
    return Account(
        account_id=account_id,
        username=username,
        email=email,
        password_hash=password_hash,
        created_at=datetime.fromisoformat(created_at),
    )


class SqliteAccountRepository(AccountRepository):
    """SQLite implementation of AccountRepository.

    Inserts run under an asyncio lock and rely on the unique indexes on
    ``username COLLATE NOCASE`` and ``email`` as the authoritative guard,
    mapping IntegrityError to the matching conflict error. Any other
    sqlite3 error is logged and raised as StorageUnavailableError.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_account(self, account: Account) -> None:
        """Insert an account. Raises DuplicateUsernameError or DuplicateEmailError."""
        async with self._lock:
            conn = self._db.connection
            try:
                conn.execute(
                    "INSERT INTO accounts (id, username, email, password_hash, created_at) VALUES (?, ?, ?, ?, ?)",
                    (
                        account.account_id,
                        account.username,
                        account.email,
                        account.password_hash,
                        account.created_at.isoformat(),
                    ),
                )
                conn.commit()
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                error_msg = str(exc).lower()
                if "accounts.username" in error_msg or "idx_accounts_username" in error_msg:
                    raise DuplicateUsernameError from exc
                if "accounts.email" in error_msg or "idx_accounts_email" in error_msg:
                    raise DuplicateEmailError from exc
                logger.exception("unexpected integrity error on account insert", account_id=account.account_id)
                raise StorageUnavailableError from exc
            except sqlite3.Error as exc:
                conn.rollback()
                logger.exception("account insert failed", account_id=account.account_id)
                raise StorageUnavailableError from exc

    async def get_by_username(self, username: str) -> Account | None:
        """Look up an account by username (case-insensitive)."""
        return self._fetch_one(f"{_SELECT_COLUMNS} WHERE username = ? COLLATE NOCASE", (username,))

    async def get_by_email(self, email: str) -> Account | None:
        """Look up an account by normalized email."""
        return self._fetch_one(f"{_SELECT_COLUMNS} WHERE email = ?", (normalize_email(email),))

    async def get_by_identifier(self, identifier: str) -> Account | None:
        """Look up an account whose username or email equals the identifier."""
        return self._fetch_one(
            f"{_SELECT_COLUMNS} WHERE username = ? COLLATE NOCASE OR email = ? LIMIT 1",
            (identifier.strip(), normalize_email(identifier)),
        )

    def _fetch_one(self, query: str, params: tuple[str, ...]) -> Account | None:
        try:
            row = self._db.connection.execute(query, params).fetchone()
        except sqlite3.Error as exc:
            logger.exception("account lookup failed")
            raise StorageUnavailableError from exc
        if row is None:
            return None
        return _row_to_account(row)
