"""Tests for CredentialStore."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import pytest

from core.auth.credentials import CredentialStore
from core.auth.errors import DuplicateEmailError, DuplicateUsernameError, StorageUnavailableError
from core.auth.password import BcryptHasher, SimpleHasher
from core.db import Database, SqliteAccountRepository

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def account_repo(tmp_path: Path):
    db = Database(tmp_path / "test.db")
    db.connect()
    yield SqliteAccountRepository(db)
    db.close()


@pytest.fixture
def store(account_repo):
    return CredentialStore(account_repo, password_hasher=SimpleHasher())


class TestCreate:
    async def test_creates_account_with_hashed_password(self, store):
        account = await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

        assert account.account_id
        assert account.username == "ben10"
        assert account.email == "ben@omnitrix.io"
        assert account.password_hash != "Upgrade1!"
        assert "Upgrade1!" not in account.password_hash

    async def test_normalizes_email(self, store):
        account = await store.create("ben10", "  Ben@Omnitrix.IO ", "Upgrade1!")
        assert account.email == "ben@omnitrix.io"

    async def test_identical_passwords_get_different_hashes(self, account_repo):
        store = CredentialStore(account_repo, password_hasher=BcryptHasher(4))
        ben = await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")
        gwen = await store.create("gwen10", "gwen@omnitrix.io", "Upgrade1!")

        assert ben.password_hash != gwen.password_hash
        assert await store.verify_password(ben, "Upgrade1!")
        assert await store.verify_password(gwen, "Upgrade1!")

    async def test_duplicate_username_any_case(self, store):
        await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

        with pytest.raises(DuplicateUsernameError) as exc_info:
            await store.create("BEN10", "other@omnitrix.io", "Upgrade1!")
        assert exc_info.value.field == "username"
        assert str(exc_info.value) == "Username already taken"

    async def test_duplicate_email_any_case(self, store):
        await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

        with pytest.raises(DuplicateEmailError) as exc_info:
            await store.create("benjamin", " BEN@omnitrix.io", "Upgrade1!")
        assert exc_info.value.field == "email"
        assert str(exc_info.value) == "Email already registered"

    async def test_username_conflict_reported_before_email(self, store):
        await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

        with pytest.raises(DuplicateUsernameError):
            await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

    async def test_constraint_catches_race_past_precheck(self, store, account_repo):
        """A concurrent signup that passed the pre-check still hits the unique index."""
        await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

        with (
            patch.object(account_repo, "get_by_username", new_callable=AsyncMock, return_value=None),
            patch.object(account_repo, "get_by_email", new_callable=AsyncMock, return_value=None),
            pytest.raises(DuplicateUsernameError),
        ):
            await store.create("Ben10", "ben2@omnitrix.io", "Upgrade1!")

    async def test_hashing_failure_is_storage_error(self, account_repo):
        hasher = SimpleHasher()
        store = CredentialStore(account_repo, password_hasher=hasher)

        with (
            patch.object(hasher, "hash", new_callable=AsyncMock, side_effect=ValueError("salt")),
            pytest.raises(StorageUnavailableError),
        ):
            await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

    async def test_unexpected_hasher_error_is_storage_error(self, account_repo):
        hasher = SimpleHasher()
        store = CredentialStore(account_repo, password_hasher=hasher)

        with (
            patch.object(hasher, "hash", new_callable=AsyncMock, side_effect=RuntimeError("worker thread died")),
            pytest.raises(StorageUnavailableError),
        ):
            await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

        assert await account_repo.get_by_username("ben10") is None


class TestFindByIdentifier:
    async def test_finds_by_username(self, store):
        created = await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

        found = await store.find_by_identifier("ben10")
        assert found is not None
        assert found.account_id == created.account_id

    async def test_finds_by_username_case_insensitive(self, store):
        created = await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

        found = await store.find_by_identifier("Ben10")
        assert found is not None
        assert found.account_id == created.account_id

    async def test_finds_by_email(self, store):
        created = await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

        found = await store.find_by_identifier(" Ben@Omnitrix.io ")
        assert found is not None
        assert found.account_id == created.account_id

    async def test_returns_none_for_unknown(self, store):
        assert await store.find_by_identifier("kevin11") is None

    async def test_returns_none_for_blank(self, store):
        assert await store.find_by_identifier("   ") is None


class TestVerifyPassword:
    async def test_correct_password(self, store):
        account = await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")
        assert await store.verify_password(account, "Upgrade1!") is True

    async def test_wrong_password(self, store):
        account = await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")
        assert await store.verify_password(account, "upgrade1!") is False
        assert await store.verify_password(account, "") is False

    async def test_hasher_error_is_storage_error(self, account_repo):
        hasher = SimpleHasher()
        store = CredentialStore(account_repo, password_hasher=hasher)
        account = await store.create("ben10", "ben@omnitrix.io", "Upgrade1!")

        with (
            patch.object(hasher, "verify", new_callable=AsyncMock, side_effect=RuntimeError("worker thread died")),
            pytest.raises(StorageUnavailableError),
        ):
            await store.verify_password(account, "Upgrade1!")


class TestVerifyUnknown:
    async def test_always_false(self, store):
        assert await store.verify_unknown("Upgrade1!") is False
        assert await store.verify_unknown("") is False

    async def test_runs_one_verification(self, account_repo):
        hasher = SimpleHasher()
        store = CredentialStore(account_repo, password_hasher=hasher)

        with patch.object(hasher, "verify", new_callable=AsyncMock, wraps=hasher.verify) as verify:
            await store.verify_unknown("Upgrade1!")
            await store.verify_unknown("Upgrade1!")

        assert verify.await_count == 2

    async def test_throwaway_hash_computed_once(self, account_repo):
        hasher = SimpleHasher()
        store = CredentialStore(account_repo, password_hasher=hasher)

        with patch.object(hasher, "hash", new_callable=AsyncMock, wraps=hasher.hash) as hash_:
            await store.verify_unknown("Upgrade1!")
            await store.verify_unknown("Omnitrix2")

        assert hash_.await_count == 1

    async def test_hasher_error_is_storage_error(self, account_repo):
        hasher = SimpleHasher()
        store = CredentialStore(account_repo, password_hasher=hasher)

        with (
            patch.object(hasher, "verify", new_callable=AsyncMock, side_effect=RuntimeError("worker thread died")),
            pytest.raises(StorageUnavailableError),
        ):
            await store.verify_unknown("Upgrade1!")
