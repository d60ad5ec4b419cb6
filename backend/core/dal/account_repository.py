"""Abstract interface for account persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.auth.models import Account


class AccountRepository(ABC):
    """Abstract interface for account persistence.

    Implementations must enforce username (case-insensitive) and email
    uniqueness atomically with the insert, raising DuplicateUsernameError
    or DuplicateEmailError, and report backend failures as
    StorageUnavailableError.
    """

    @abstractmethod
    async def create_account(self, account: Account) -> None: ...

    @abstractmethod
    async def get_by_username(self, username: str) -> Account | None: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Account | None: ...

    @abstractmethod
    async def get_by_identifier(self, identifier: str) -> Account | None: ...
