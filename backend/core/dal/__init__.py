"""Data access layer: repository interfaces."""

from core.dal.account_repository import AccountRepository

__all__ = [
    "AccountRepository",
]
