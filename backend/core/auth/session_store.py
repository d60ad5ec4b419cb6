"""In-memory session store with lazy expiry."""

import secrets
import time

import structlog

from core.auth.models import AuthSession

DEFAULT_SESSION_TTL_SECONDS = 3600  # 1 hour
SESSION_ID_BYTES = 32

logger = structlog.get_logger()


class SessionStore:
    """In-memory session store keyed by an opaque random reference.

    Sessions are ephemeral: a server restart means re-login. Expiry is
    checked when a reference is validated; there is no background sweep.
    Expired records left behind are purged opportunistically on issue.
    """

    def __init__(self, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS) -> None:
        self._ttl_seconds = ttl_seconds
        self._sessions: dict[str, AuthSession] = {}

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def issue(self, account_id: str, username: str, email: str) -> AuthSession:
        """Create a session for an authenticated account."""
        self.purge_expired()
        now = time.time()
        session = AuthSession(
            session_id=secrets.token_urlsafe(SESSION_ID_BYTES),
            account_id=account_id,
            username=username,
            email=email,
            created_at=now,
            expires_at=now + self._ttl_seconds,
        )
        self._sessions[session.session_id] = session
        return session

    def validate(self, session_id: str | None) -> AuthSession | None:
        """Return an active (non-expired) session, or None."""
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if time.time() >= session.expires_at:
            del self._sessions[session_id]
            return None
        return session

    def destroy(self, session_id: str) -> None:
        """Remove a session. Unknown references are ignored."""
        self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        """Remove all expired sessions. Return count of removed sessions."""
        now = time.time()
        expired = [sid for sid, s in self._sessions.items() if now >= s.expires_at]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("purged expired sessions", count=len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
