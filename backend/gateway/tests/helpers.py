"""Form helpers for gateway tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from httpx import Response
    from starlette.testclient import TestClient

PASSWORD = "Upgrade1!"


def signup(client: TestClient, username: str = "ben10", email: str = "ben@omnitrix.io", **overrides: str) -> Response:
    """POST the signup form without following the redirect."""
    data = {"username": username, "email": email, "password": PASSWORD, "confirmPassword": PASSWORD}
    data.update(overrides)
    return client.post("/signup", data=data, follow_redirects=False)


def login(client: TestClient, identifier: str = "ben10", password: str = PASSWORD) -> Response:
    """POST the login form without following the redirect."""
    return client.post("/login", data={"username": identifier, "password": password}, follow_redirects=False)
