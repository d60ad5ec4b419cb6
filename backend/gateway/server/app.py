from __future__ import annotations

import contextlib
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from core.auth import AuthService, AuthSettings, CredentialStore, SessionStore, get_hasher
from core.db import Database, SqliteAccountRepository
from core.logging import setup_logging
from gateway.auth.backend import SessionCookieBackend
from gateway.auth.policy import (
    public_route,
    reject_if_authenticated,
    require_authenticated,
    validate_route_auth_policy,
)
from gateway.server.middleware import SecurityHeadersMiddleware, SlashNormalizationMiddleware
from gateway.server.settings import GatewayServerSettings
from gateway.views import (
    create_templates,
    dashboard_page,
    health,
    home,
    login,
    login_page,
    logout,
    signup,
    signup_page,
)

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


def create_app(
    settings: GatewayServerSettings | None = None,
    auth_settings: AuthSettings | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = GatewayServerSettings()
    if auth_settings is None:  # pragma: no cover
        auth_settings = AuthSettings()

    static_dir = Path(settings.static_dir).resolve()

    routes = [
        Route("/", public_route(home), methods=["GET"], name="home"),
        Route("/health", public_route(health), methods=["GET"], name="health"),
        Route("/logout", public_route(logout), methods=["GET"], name="logout"),
        # Anonymous-only forms (redirect to the dashboard when logged in)
        Route("/login", reject_if_authenticated(login_page), methods=["GET"], name="login_page"),
        Route("/login", reject_if_authenticated(login), methods=["POST"], name="login"),
        Route("/signup", reject_if_authenticated(signup_page), methods=["GET"], name="signup_page"),
        Route("/signup", reject_if_authenticated(signup), methods=["POST"], name="signup"),
        # Protected (redirect to login when anonymous)
        Route("/dashboard", require_authenticated(dashboard_page), methods=["GET"], name="dashboard"),
    ]

    if static_dir.is_dir():
        routes.append(Mount("/static", app=StaticFiles(directory=str(static_dir)), name="static"))
    else:
        logger.info("static directory not found, /static/ will not be served", path=str(static_dir))

    validate_route_auth_policy(routes)

    # Components live for the whole process and are shared through app.state.
    db = Database(auth_settings.database_path)
    db.connect()
    account_repo = SqliteAccountRepository(db)
    hasher = get_hasher(auth_settings.password_hasher, rounds=auth_settings.bcrypt_rounds)
    credential_store = CredentialStore(account_repo, password_hasher=hasher)
    session_store = SessionStore(ttl_seconds=auth_settings.session_ttl_seconds)
    auth_service = AuthService(credential_store, session_store)

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:  # pragma: no cover
        yield
        db.close()

    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(AuthenticationMiddleware, backend=SessionCookieBackend(auth_service))  # type: ignore[arg-type]
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)  # type: ignore[arg-type]
    app.add_middleware(SecurityHeadersMiddleware)  # type: ignore[arg-type]

    app.state.db = db
    app.state.settings = settings
    app.state.auth_settings = auth_settings
    app.state.templates = create_templates()
    app.state.credential_store = credential_store
    app.state.session_store = session_store
    app.state.auth_service = auth_service

    logger.info("gateway server ready")
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory gateway.server.app:get_app."""
    s = GatewayServerSettings()
    auth = AuthSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, auth_settings=auth)
