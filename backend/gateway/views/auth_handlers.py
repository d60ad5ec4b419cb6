"""Auth endpoints: login, signup, and logout for the gateway."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.responses import RedirectResponse, Response

from core.auth.errors import AuthError
from gateway.auth.backend import SESSION_COOKIE_NAME
from gateway.auth.policy import LANDING_PATH, LOGIN_PATH

if TYPE_CHECKING:
    from starlette.datastructures import FormData
    from starlette.requests import Request

    from core.auth.models import AuthSession
    from core.auth.service import AuthService
    from core.auth.settings import AuthSettings

logger = structlog.get_logger()


def _form_str(form: FormData, *names: str) -> str:
    """Return the first string value present under any of ``names``."""
    for name in names:
        value = form.get(name)
        if isinstance(value, str):
            return value
    return ""


def _redirect_with_session_cookie(session: AuthSession, auth_settings: AuthSettings) -> Response:
    """Redirect to the dashboard and set the session cookie."""
    response = RedirectResponse(LANDING_PATH, status_code=303)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.session_id,
        httponly=True,
        samesite="lax",
        secure=auth_settings.cookie_secure,
        max_age=auth_settings.session_ttl_seconds,
        path="/",
    )
    return response


async def login_page(request: Request) -> Response:
    """GET /login - render login form."""
    templates = request.app.state.templates
    return templates.TemplateResponse(request, "login.html", {"error": None, "username": ""})


async def login(request: Request) -> Response:
    """POST /login - verify credentials, set session cookie, redirect to dashboard."""
    auth_service: AuthService = request.app.state.auth_service
    templates = request.app.state.templates
    form = await request.form()

    username = _form_str(form, "username")
    password = _form_str(form, "password")

    try:
        session = await auth_service.login(username, password)
    except AuthError as e:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": str(e), "username": username.strip()},
        )

    return _redirect_with_session_cookie(session, request.app.state.auth_settings)


async def signup_page(request: Request) -> Response:
    """GET /signup - render signup form."""
    templates = request.app.state.templates
    return templates.TemplateResponse(request, "signup.html", {"error": None, "form_data": {}})


async def signup(request: Request) -> Response:
    """POST /signup - create account, auto-login, redirect to dashboard."""
    auth_service: AuthService = request.app.state.auth_service
    templates = request.app.state.templates
    form = await request.form()

    username = _form_str(form, "username")
    email = _form_str(form, "email")
    password = _form_str(form, "password")
    confirm_password = _form_str(form, "confirmPassword", "confirm_password")

    try:
        session = await auth_service.signup(username, email, password, confirm_password)
    except AuthError as e:
        # Passwords are never echoed back into the form.
        return templates.TemplateResponse(
            request,
            "signup.html",
            {"error": str(e), "form_data": {"username": username, "email": email}},
        )

    return _redirect_with_session_cookie(session, request.app.state.auth_settings)


async def logout(request: Request) -> Response:
    """GET /logout - destroy session, clear cookie, redirect to login.

    Always redirects, even if destroying the session fails.
    """
    auth_service: AuthService = request.app.state.auth_service
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if session_id:
        try:
            auth_service.logout(session_id)
        except Exception:
            logger.exception("session destroy failed during logout")
    response = RedirectResponse(LOGIN_PATH, status_code=303)
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
    return response
