"""Error taxonomy for signup, login, and storage failures.

Every error carries a user-facing message. View handlers render ``str(error)``
into the form, so messages must never include internal details.
"""

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
RETRY_LATER_MESSAGE = "An error occurred. Please try again."


class AuthError(Exception):
    """Base class for authentication failures reported to the user."""


class FormValidationError(AuthError):
    """Submitted form input violated a field rule."""


class AuthenticationError(AuthError):
    """Unknown identifier or wrong password. Never distinguishes the two."""

    def __init__(self) -> None:
        super().__init__(INVALID_CREDENTIALS_MESSAGE)


class ConflictError(AuthError):
    """A unique field is already used by another account."""

    field: str = ""


class DuplicateUsernameError(ConflictError):
    field = "username"

    def __init__(self) -> None:
        super().__init__("Username already taken")


class DuplicateEmailError(ConflictError):
    field = "email"

    def __init__(self) -> None:
        super().__init__("Email already registered")


class StorageUnavailableError(AuthError):
    """Storage or hashing failed. The cause is logged, never shown."""

    def __init__(self) -> None:
        super().__init__(RETRY_LATER_MESSAGE)
