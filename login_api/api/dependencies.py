"""FastAPI dependencies for the auth workflow and bearer authentication."""

from typing import Optional

import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from login_api.exceptions import AuthError
from login_api.models.user import User
from login_api.services.auth_service import AuthService

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    """Return the AuthService built at startup."""
    return request.app.state.auth_service


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Resolve the user named by a valid Bearer token.

    Raises:
        HTTPException 401: If the token is missing, invalid or expired, or
            the user no longer exists or is disabled
    """
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = credentials.credentials if credentials is not None else None
    if not auth_service.token_service.validate(token):
        raise unauthorized

    try:
        email = auth_service.token_service.subject_of(token)
        user = await auth_service.get_user_by_email(email)
    except AuthError as e:
        logger.warning("bearer_auth_failed", error_type=type(e).__name__)
        raise unauthorized

    if not user.is_active:
        logger.warning("bearer_auth_inactive_user", user_id=user.id)
        raise unauthorized

    return user
