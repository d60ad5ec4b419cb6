"""Gateway authentication: Starlette backend, account model, and route policy."""

from gateway.auth.backend import SESSION_COOKIE_NAME, SessionCookieBackend
from gateway.auth.models import AuthenticatedAccount
from gateway.auth.policy import (
    public_route,
    reject_if_authenticated,
    require_authenticated,
    validate_route_auth_policy,
)

__all__ = [
    "SESSION_COOKIE_NAME",
    "AuthenticatedAccount",
    "SessionCookieBackend",
    "public_route",
    "reject_if_authenticated",
    "require_authenticated",
    "validate_route_auth_policy",
]
