"""Services package exports."""

from login_api.services.auth_service import AuthService
from login_api.services.credential_store import CredentialStore, PostgresCredentialStore
from login_api.services.logging_service import configure_logging, get_logger
from login_api.services.password_service import PasswordHasher
from login_api.services.token_service import TokenService

__all__ = [
    "AuthService",
    "CredentialStore",
    "PasswordHasher",
    "PostgresCredentialStore",
    "TokenService",
    "configure_logging",
    "get_logger",
]
