"""SQLite connection holding the account table."""

import os
import sqlite3
from pathlib import Path

import structlog

logger = structlog.get_logger()

OWNER_ONLY = 0o600

# WAL lets readers proceed during a signup insert; busy_timeout covers a
# second process such as bin/create-account.py holding the write lock.
_PRAGMAS = ("PRAGMA journal_mode=WAL", "PRAGMA busy_timeout=5000")

# Uniqueness lives in the indexes, not in application code: username is
# compared case-insensitively, email is stored already normalized.
_ACCOUNTS_SCHEMA = """\
CREATE TABLE IF NOT EXISTS accounts (
    id TEXT PRIMARY KEY,
    username TEXT NOT NULL,
    email TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_accounts_username
    ON accounts (username COLLATE NOCASE);

CREATE UNIQUE INDEX IF NOT EXISTS idx_accounts_email
    ON accounts (email);
"""


def _restrict_to_owner(db_path: str) -> None:
    """chmod the database and its WAL/SHM files; they all contain hashes."""
    if os.name != "posix":  # pragma: no cover
        return
    for candidate in (Path(db_path + suffix) for suffix in ("", "-wal", "-shm")):
        if not candidate.exists():
            continue
        try:
            candidate.chmod(OWNER_ONLY)
        except OSError:
            logger.warning("could not restrict database file permissions", path=str(candidate))


class Database:
    """Owns the single sqlite3 connection shared by the account repository."""

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> None:
        """Open the file (creating parent directories) and ensure the schema exists."""
        Path(self._path).parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self._path, check_same_thread=False)
        for pragma in _PRAGMAS:
            conn.execute(pragma)
        conn.executescript(_ACCOUNTS_SCHEMA)
        self._conn = conn

        _restrict_to_owner(self._path)
        logger.info("account database ready", path=self._path)

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
