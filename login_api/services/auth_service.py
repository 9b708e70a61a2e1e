"""Login and signup workflow over the credential store and token service."""

from typing import Optional

import structlog

from login_api.exceptions import (
    AuthenticationFailed,
    AuthFailureReason,
    DuplicateEmail,
    UserNotFound,
)
from login_api.models.auth import LoginResponse, SignupResponse
from login_api.models.user import User
from login_api.services.credential_store import CredentialStore
from login_api.services.password_service import PasswordHasher
from login_api.services.token_service import TokenService

logger = structlog.get_logger(__name__)

SIGNUP_SUCCESS_MESSAGE = "User registered successfully"


class AuthService:
    """Orchestrates signup and login.

    Holds its collaborators by reference; they are built once at startup
    and passed in explicitly.
    """

    def __init__(
        self,
        store: CredentialStore,
        token_service: TokenService,
        password_hasher: Optional[PasswordHasher] = None,
    ):
        self.store = store
        self.token_service = token_service
        self.password_hasher = password_hasher or PasswordHasher()

    async def login(self, email: str, password: str) -> LoginResponse:
        """Check credentials and issue a token.

        Unknown email and wrong password raise the same error kind; only
        ``AuthenticationFailed.reason`` tells them apart, for logging.

        Args:
            email: Email the user signed up with
            password: Plain-text password

        Returns:
            LoginResponse with token, identity fields and expiry window

        Raises:
            AuthenticationFailed: If the email is unknown or the password is wrong
        """
        user = await self.store.find_by_email(email)

        if user is None:
            raise AuthenticationFailed(AuthFailureReason.UNKNOWN_EMAIL)

        if not self.password_hasher.verify_password(password, user.password_hash):
            raise AuthenticationFailed(AuthFailureReason.BAD_PASSWORD)

        token = self.token_service.issue(user.email)
        logger.info("user_logged_in", user_id=user.id)

        return LoginResponse(
            token=token,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            expires_in=self.token_service.expiry_window(),
        )

    async def signup(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> SignupResponse:
        """Register a new user.

        Args:
            email: Unique email (no format validation applied)
            password: Plain-text password (hashed before storage)
            first_name: Given name
            last_name: Family name

        Returns:
            SignupResponse echoing the stored identity

        Raises:
            DuplicateEmail: If the email is already registered
            PasswordTooLong: If the password is longer than bcrypt accepts
        """
        if await self.store.exists_by_email(email):
            raise DuplicateEmail(email)

        user = User(
            email=email,
            password_hash=self.password_hasher.hash_password(password),
            first_name=first_name,
            last_name=last_name,
            is_active=True,
        )
        saved = await self.store.save(user)

        logger.info("user_signed_up", user_id=saved.id)

        return SignupResponse(
            id=saved.id,
            email=saved.email,
            first_name=saved.first_name,
            last_name=saved.last_name,
            message=SIGNUP_SUCCESS_MESSAGE,
        )

    async def get_user_by_email(self, email: str) -> User:
        """Look up a user by email.

        Raises:
            UserNotFound: If no user has this email
        """
        user = await self.store.find_by_email(email)
        if user is None:
            raise UserNotFound(email)
        return user
