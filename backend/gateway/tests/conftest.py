"""Shared fixtures for gateway tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from starlette.testclient import TestClient

from core.auth.settings import AuthSettings
from gateway.server.app import create_app
from gateway.server.settings import GatewayServerSettings

if TYPE_CHECKING:
    from pathlib import Path

    from starlette.applications import Starlette


@pytest.fixture
def app(tmp_path: Path) -> Starlette:
    static_dir = tmp_path / "public"
    (static_dir / "styles").mkdir(parents=True)
    (static_dir / "styles" / "main.css").write_text("body { margin: 0; }")

    return create_app(
        settings=GatewayServerSettings(static_dir=str(static_dir)),
        auth_settings=AuthSettings(database_path=str(tmp_path / "test.db"), password_hasher="simple"),
    )


@pytest.fixture
def client(app: Starlette):
    yield TestClient(app)
    app.state.db.close()
