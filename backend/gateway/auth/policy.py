"""Route auth policy helpers for fail-closed authorization.

Each helper wraps a route endpoint and sets the ``AUTH_POLICY_ATTR`` marker
so that startup validation can verify every route has an explicit policy.
"""

from __future__ import annotations

import functools
import inspect
from typing import TYPE_CHECKING

from starlette.authentication import has_required_scope
from starlette.responses import RedirectResponse, Response
from starlette.routing import Mount, Route

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

    from starlette.requests import Request
    from starlette.routing import BaseRoute

AUTH_POLICY_ATTR = "__auth_policy__"

LOGIN_PATH = "/login"
LANDING_PATH = "/dashboard"


def is_authenticated(request: Request) -> bool:
    return has_required_scope(request, ["authenticated"])


def _redirect_anonymous(request: Request) -> Response | None:
    """Send anonymous users to the login page.

    Relative redirect URLs avoid Host-header open redirects.
    """
    if is_authenticated(request):
        return None
    return RedirectResponse(url=LOGIN_PATH, status_code=303)


def _redirect_authenticated(request: Request) -> Response | None:
    if is_authenticated(request):
        return RedirectResponse(url=LANDING_PATH, status_code=303)
    return None


def _allow(_request: Request) -> Response | None:
    return None


def _apply_policy(
    endpoint: Callable[..., Any],
    policy: str,
    guard: Callable[[Request], Response | None],
) -> Callable[..., Any]:
    """Wrap a sync or async endpoint so ``guard`` runs first.

    The marker lives on the wrapper, not on the original callable, so reusing
    the same function on another route without wrapping stays unclassified.
    """
    if inspect.iscoroutinefunction(endpoint):

        @functools.wraps(endpoint)
        async def async_wrapper(request: Request, **kwargs: str) -> Response:
            rejected = guard(request)
            if rejected is not None:
                return rejected
            return await endpoint(request, **kwargs)

        setattr(async_wrapper, AUTH_POLICY_ATTR, policy)
        return async_wrapper

    @functools.wraps(endpoint)
    def sync_wrapper(request: Request, **kwargs: str) -> Response:
        rejected = guard(request)
        if rejected is not None:
            return rejected
        return endpoint(request, **kwargs)

    setattr(sync_wrapper, AUTH_POLICY_ATTR, policy)
    return sync_wrapper


def require_authenticated(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Require an active session; redirect anonymous users to /login."""
    return _apply_policy(endpoint, "require_authenticated", _redirect_anonymous)


def reject_if_authenticated(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Redirect users with an active session to /dashboard.

    Keeps a logged-in user from re-submitting the login or signup forms.
    """
    return _apply_policy(endpoint, "reject_if_authenticated", _redirect_authenticated)


def public_route(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Mark endpoint as explicitly public (no gate)."""
    return _apply_policy(endpoint, "public", _allow)


def validate_route_auth_policy(routes: list[BaseRoute]) -> None:
    """Verify every Route has an auth policy marker. Mount routes are exempt.

    Raises RuntimeError listing all unclassified routes if any are found.
    """
    unclassified: list[str] = []
    for route in routes:
        if isinstance(route, Mount):
            continue
        if isinstance(route, Route) and not hasattr(route.endpoint, AUTH_POLICY_ATTR):
            name = route.name or getattr(route.endpoint, "__name__", "unknown")
            unclassified.append(f"{route.path} ({name})")

    if unclassified:
        details = ", ".join(unclassified)
        msg = f"Unclassified routes missing auth policy: {details}"
        raise RuntimeError(msg)
