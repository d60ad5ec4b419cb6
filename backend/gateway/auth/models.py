"""User model for Starlette AuthenticationMiddleware integration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.authentication import BaseUser

if TYPE_CHECKING:
    from core.auth.models import AuthSession


class AuthenticatedAccount(BaseUser):
    """Authenticated account for Starlette's request.user.

    Built by the auth backend from an active session; every field comes
    from server-side session state, never from the credential store.
    """

    def __init__(self, session: AuthSession) -> None:
        self._session = session

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self._session.username

    @property
    def identity(self) -> str:
        return self._session.account_id

    @property
    def account_id(self) -> str:
        return self._session.account_id

    @property
    def username(self) -> str:
        return self._session.username

    @property
    def email(self) -> str:
        return self._session.email

    @property
    def session_id(self) -> str:
        return self._session.session_id
