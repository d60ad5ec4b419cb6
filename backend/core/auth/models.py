"""Account and session models for authentication."""

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, Field


class Account(BaseModel, frozen=True):
    """Account stored in the credential store."""

    account_id: str
    username: str
    email: str  # normalized: trimmed and lowercased
    password_hash: str = Field(min_length=1, repr=False)  # bcrypt hash, salt embedded
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))


@dataclass
class AuthSession:
    """Server-side session for an authenticated account."""

    session_id: str  # opaque reference, stored in cookie
    account_id: str
    username: str
    email: str
    created_at: float  # time.time()
    expires_at: float  # time.time() + TTL
