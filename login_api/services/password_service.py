"""One-way password hashing with bcrypt."""

import bcrypt

from login_api.exceptions import PasswordTooLong
from login_api.models.auth import MAX_PASSWORD_BYTES

DEFAULT_ROUNDS = 12


class PasswordHasher:
    """Salted, deliberately slow password hashing."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string

        Raises:
            PasswordTooLong: If the encoded password exceeds 72 bytes
        """
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise PasswordTooLong(MAX_PASSWORD_BYTES)

        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(encoded, salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        An empty password never verifies, and a malformed hash counts as
        a mismatch.

        Args:
            password: Plain-text password to check
            password_hash: Bcrypt hash to verify against

        Returns:
            True if the password matches, False otherwise
        """
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            return False
