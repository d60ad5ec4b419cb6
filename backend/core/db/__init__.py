"""SQLite database layer: connection management and repository implementations."""

from core.db.account_repository import SqliteAccountRepository
from core.db.connection import Database

__all__ = [
    "Database",
    "SqliteAccountRepository",
]
