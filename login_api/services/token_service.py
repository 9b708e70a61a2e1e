"""Signed, time-limited bearer tokens bound to an email claim."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import uuid4

import jwt
import structlog

from login_api.exceptions import InvalidToken

logger = structlog.get_logger(__name__)

JWT_ALGORITHM = "HS256"
DEFAULT_EXPIRATION_MS = 86_400_000  # 24 hours


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies JWTs whose ``sub`` claim is the user's email.

    The signing key and validity window are fixed at construction; nothing
    about a token's signature is derived from request data.
    """

    def __init__(
        self,
        secret: str,
        expiration_ms: int = DEFAULT_EXPIRATION_MS,
        algorithm: str = JWT_ALGORITHM,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._expiration_ms = expiration_ms
        self._algorithm = algorithm
        self._clock = clock or _utcnow

    def issue(self, subject: str) -> str:
        """Create a signed token for ``subject``.

        A random ``jti`` keeps tokens distinct even when the same subject is
        issued twice within one second.

        Args:
            subject: Identity claim (the user's email)

        Returns:
            Encoded JWT string
        """
        now = self._clock()
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + timedelta(milliseconds=self._expiration_ms),
            "jti": uuid4().hex,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        logger.debug("token_issued", expires_in_ms=self._expiration_ms)
        return token

    def subject_of(self, token: str) -> str:
        """Decode a token and return its subject claim.

        Args:
            token: Encoded JWT string

        Returns:
            The ``sub`` claim

        Raises:
            InvalidToken: If the token is malformed, badly signed, expired,
                or has no usable subject
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Invalid token: {e}")

        subject = payload.get("sub")
        if not isinstance(subject, str):
            raise InvalidToken("Invalid token: missing subject")
        return subject

    def validate(self, token: Optional[str]) -> bool:
        """Return True iff ``token`` is well-formed, correctly signed and unexpired.

        Never raises; absent or garbage input is simply not valid.
        """
        if not token or not isinstance(token, str):
            return False
        try:
            self.subject_of(token)
        except InvalidToken as e:
            logger.debug("token_rejected", error=str(e))
            return False
        return True

    def expiry_window(self) -> int:
        """Token validity window in milliseconds."""
        return self._expiration_ms
