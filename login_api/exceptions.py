"""Typed failures raised by the auth workflow and token service."""

from enum import Enum


class AuthError(Exception):
    """Base class for every failure the auth workflow raises."""


class AuthFailureReason(str, Enum):
    """Internal cause of an authentication failure.

    Only ever logged server-side; clients see a single failure kind.
    """

    UNKNOWN_EMAIL = "unknown_email"
    BAD_PASSWORD = "bad_password"


class AuthenticationFailed(AuthError):
    """Credentials did not match a known user.

    Attributes:
        reason: Which branch rejected the credentials
    """

    def __init__(self, reason: AuthFailureReason):
        self.reason = reason
        super().__init__("Invalid email or password")


class DuplicateEmail(AuthError):
    """Signup attempted with an email that is already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email already exists")


class UserNotFound(AuthError):
    """Direct lookup found no user for the given email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("User not found")


class InvalidToken(AuthError):
    """Token could not be decoded or verified."""


class PasswordTooLong(AuthError):
    """Password exceeds the number of bytes bcrypt can hash."""

    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes
        super().__init__(f"Password must be at most {max_bytes} bytes")
