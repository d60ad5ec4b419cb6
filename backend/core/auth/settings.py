"""Auth settings: account storage, password hashing, and session cookies."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "AUTH_"}

    # SQLite database file path
    database_path: str = "backend/accounts.db"

    # Cookie Secure flag -- True in production, False for local dev (HTTP)
    cookie_secure: bool = False

    # Absolute session lifetime from issuance
    session_ttl_seconds: int = Field(default=3600, gt=0)

    # "simple" is only for tests
    password_hasher: Literal["bcrypt", "simple"] = "bcrypt"

    # bcrypt cost factor; 10 rounds verifies in tens of milliseconds
    bcrypt_rounds: int = Field(default=10, ge=4, le=16)
