"""Create an account from the command line.

Usage: uv run python bin/create-account.py <username> <email>

The password is read from the terminal and never echoed. The same field
rules and uniqueness checks as the signup form apply.
"""

import asyncio
import getpass
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from core.auth import AuthError, AuthSettings, CredentialStore, get_hasher
from core.auth.validation import validate_signup
from core.db import Database, SqliteAccountRepository


async def main() -> None:
    if len(sys.argv) != 3:
        print(f"Usage: {sys.argv[0]} <username> <email>")
        sys.exit(1)

    username, email = sys.argv[1], sys.argv[2]
    password = getpass.getpass("Password: ")
    confirm_password = getpass.getpass("Confirm password: ")

    auth_settings = AuthSettings()
    db = Database(auth_settings.database_path)
    db.connect()

    try:
        hasher = get_hasher(auth_settings.password_hasher, rounds=auth_settings.bcrypt_rounds)
        credential_store = CredentialStore(SqliteAccountRepository(db), password_hasher=hasher)

        try:
            form = validate_signup(username, email, password, confirm_password)
            account = await credential_store.create(form.username, form.email, form.password)
        except AuthError as e:
            print(f"Error: {e}")
            sys.exit(1)

        print(f"Account created: {account.username} <{account.email}> (id: {account.account_id})")
    finally:
        db.close()


if __name__ == "__main__":
    asyncio.run(main())
