"""Starlette AuthenticationBackend that validates the session cookie."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.authentication import AuthCredentials, AuthenticationBackend

from gateway.auth.models import AuthenticatedAccount

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection

    from core.auth.service import AuthService

SESSION_COOKIE_NAME = "session_id"


class SessionCookieBackend(AuthenticationBackend):
    """Authenticate requests via the opaque session cookie.

    Missing, unknown, destroyed, and expired references all leave the
    request anonymous; the route policy decides what that means.
    """

    def __init__(self, auth_service: AuthService) -> None:
        self._auth_service = auth_service

    async def authenticate(
        self,
        conn: HTTPConnection,
    ) -> tuple[AuthCredentials, AuthenticatedAccount] | None:
        session = self._auth_service.validate_session(conn.cookies.get(SESSION_COOKIE_NAME))
        if session is None:
            return None
        return AuthCredentials(["authenticated"]), AuthenticatedAccount(session)
