"""Tests for AuthService."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import pytest

from core.auth.credentials import CredentialStore
from core.auth.errors import (
    AuthenticationError,
    DuplicateEmailError,
    DuplicateUsernameError,
    FormValidationError,
    StorageUnavailableError,
)
from core.auth.password import SimpleHasher
from core.auth.service import AuthService
from core.auth.session_store import SessionStore
from core.db import Database, SqliteAccountRepository

if TYPE_CHECKING:
    from pathlib import Path

PASSWORD = "Upgrade1!"


@pytest.fixture
def session_store():
    return SessionStore()


@pytest.fixture
def account_repo(tmp_path: Path):
    db = Database(tmp_path / "test.db")
    db.connect()
    yield SqliteAccountRepository(db)
    db.close()


@pytest.fixture
def auth_service(account_repo, session_store):
    credential_store = CredentialStore(account_repo, password_hasher=SimpleHasher())
    return AuthService(credential_store, session_store)


async def _signup_ben(auth_service: AuthService):
    return await auth_service.signup("ben10", "ben@omnitrix.io", PASSWORD, PASSWORD)


class TestSignup:
    async def test_creates_account_and_issues_session(self, auth_service, session_store):
        session = await _signup_ben(auth_service)

        assert session.username == "ben10"
        assert session.email == "ben@omnitrix.io"
        assert session.account_id
        assert session_store.validate(session.session_id) == session

    async def test_stores_normalized_email(self, auth_service):
        session = await auth_service.signup("ben10", " Ben@Omnitrix.IO ", PASSWORD, PASSWORD)
        assert session.email == "ben@omnitrix.io"

    async def test_validation_runs_before_storage(self, auth_service, account_repo):
        with (
            patch.object(account_repo, "create_account", new_callable=AsyncMock) as create_account,
            pytest.raises(FormValidationError, match="Passwords do not match"),
        ):
            await auth_service.signup("ben10", "ben@omnitrix.io", PASSWORD, "Upgrade2!")
        create_account.assert_not_awaited()

    async def test_duplicate_username_rejected(self, auth_service, session_store):
        await _signup_ben(auth_service)

        with pytest.raises(DuplicateUsernameError, match="Username already taken"):
            await auth_service.signup("Ben10", "other@omnitrix.io", PASSWORD, PASSWORD)
        assert len(session_store) == 1

    async def test_duplicate_email_rejected(self, auth_service):
        await _signup_ben(auth_service)

        with pytest.raises(DuplicateEmailError, match="Email already registered"):
            await auth_service.signup("benjamin", "BEN@omnitrix.io", PASSWORD, PASSWORD)

    async def test_storage_failure_issues_no_session(self, auth_service, account_repo, session_store):
        with (
            patch.object(account_repo, "create_account", new_callable=AsyncMock, side_effect=StorageUnavailableError),
            pytest.raises(StorageUnavailableError, match="An error occurred"),
        ):
            await _signup_ben(auth_service)
        assert len(session_store) == 0


class TestLogin:
    async def test_login_by_username(self, auth_service):
        await _signup_ben(auth_service)

        session = await auth_service.login("ben10", PASSWORD)
        assert session.username == "ben10"

    async def test_login_by_email(self, auth_service):
        await _signup_ben(auth_service)

        session = await auth_service.login("ben@omnitrix.io", PASSWORD)
        assert session.username == "ben10"

    async def test_login_by_username_any_case(self, auth_service):
        await _signup_ben(auth_service)

        session = await auth_service.login("  BEN10 ", PASSWORD)
        assert session.username == "ben10"

    async def test_each_login_issues_fresh_session(self, auth_service):
        first = await _signup_ben(auth_service)
        second = await auth_service.login("ben10", PASSWORD)

        assert first.session_id != second.session_id
        assert auth_service.validate_session(first.session_id) is not None
        assert auth_service.validate_session(second.session_id) is not None

    async def test_unknown_account_and_wrong_password_look_identical(self, auth_service):
        await _signup_ben(auth_service)

        with pytest.raises(AuthenticationError) as unknown:
            await auth_service.login("kevin11", PASSWORD)
        with pytest.raises(AuthenticationError) as wrong:
            await auth_service.login("ben10", "Wrong1234")

        assert str(unknown.value) == str(wrong.value) == "Invalid credentials"

    async def test_password_is_case_sensitive(self, auth_service):
        await _signup_ben(auth_service)

        with pytest.raises(AuthenticationError):
            await auth_service.login("ben10", PASSWORD.lower())

    async def test_unknown_account_still_verifies_a_hash(self, account_repo, session_store):
        hasher = SimpleHasher()
        auth_service = AuthService(CredentialStore(account_repo, password_hasher=hasher), session_store)
        await _signup_ben(auth_service)

        with patch.object(hasher, "verify", new_callable=AsyncMock, wraps=hasher.verify) as verify:
            with pytest.raises(AuthenticationError):
                await auth_service.login("kevin11", PASSWORD)
            verify.assert_awaited_once()

            with pytest.raises(AuthenticationError):
                await auth_service.login("ben10", "Wrong1234")
            assert verify.await_count == 2

    async def test_hasher_failure_is_storage_error(self, account_repo, session_store):
        hasher = SimpleHasher()
        auth_service = AuthService(CredentialStore(account_repo, password_hasher=hasher), session_store)
        await _signup_ben(auth_service)

        with (
            patch.object(hasher, "verify", new_callable=AsyncMock, side_effect=RuntimeError("worker thread died")),
            pytest.raises(StorageUnavailableError),
        ):
            await auth_service.login("ben10", PASSWORD)
        assert len(session_store) == 1

    async def test_missing_identifier(self, auth_service):
        with pytest.raises(FormValidationError, match="Username or email is required"):
            await auth_service.login("   ", PASSWORD)

    async def test_missing_password(self, auth_service):
        with pytest.raises(FormValidationError, match="Password is required"):
            await auth_service.login("ben10", "")


class TestSessions:
    async def test_validate_unknown_session(self, auth_service):
        assert auth_service.validate_session("not-a-session") is None
        assert auth_service.validate_session(None) is None

    async def test_logout_invalidates_session(self, auth_service):
        session = await _signup_ben(auth_service)

        auth_service.logout(session.session_id)
        assert auth_service.validate_session(session.session_id) is None

    async def test_logout_unknown_session_is_noop(self, auth_service):
        auth_service.logout("never-issued")
