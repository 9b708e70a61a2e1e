"""Models package exports."""

from login_api.models.auth import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserSummary,
)
from login_api.models.user import User

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "SignupRequest",
    "SignupResponse",
    "User",
    "UserSummary",
]
