"""Gateway view handlers: root redirect, dashboard, and health."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import JSONResponse, RedirectResponse

from core.build_info import APP_VERSION, GIT_COMMIT
from gateway.auth.policy import LANDING_PATH, LOGIN_PATH, is_authenticated

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from gateway.auth.models import AuthenticatedAccount


async def home(request: Request) -> Response:
    """GET / - send users to the dashboard or the login page."""
    target = LANDING_PATH if is_authenticated(request) else LOGIN_PATH
    return RedirectResponse(target, status_code=303)


async def dashboard_page(request: Request) -> Response:
    """GET /dashboard - render the protected landing view from session state."""
    templates = request.app.state.templates
    user: AuthenticatedAccount = request.user
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"username": user.username, "email": user.email},
    )


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})
