"""Authentication API endpoints.

Workflow failures are turned into bare status codes with no body so that
responses never reveal whether an account exists.
"""

import structlog
from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from login_api.api.dependencies import get_auth_service, get_current_user
from login_api.exceptions import AuthenticationFailed, AuthError
from login_api.models.auth import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserSummary,
)
from login_api.models.user import User
from login_api.services.auth_service import AuthService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

LOGIN_PATH = "/auth/login"
HEALTH_MESSAGE = "Login service is running"


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Login with email and password.

    Returns:
        LoginResponse with token, identity fields and expiry window

    Responses:
        401 with an empty body on any failure
    """
    try:
        return await auth_service.login(request.email, request.password)
    except AuthenticationFailed as e:
        logger.warning("login_failed", reason=e.reason.value)
    except AuthError as e:
        logger.warning("login_failed", error_type=type(e).__name__)
    except Exception as e:
        logger.exception("login_failed", error_type=type(e).__name__)
    return Response(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    request: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new account.

    Returns:
        SignupResponse with the assigned id

    Responses:
        400 with an empty body on any failure (including duplicate email)
    """
    try:
        return await auth_service.signup(
            email=request.email,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
        )
    except AuthError as e:
        logger.warning("signup_failed", error_type=type(e).__name__)
    except Exception as e:
        logger.exception("signup_failed", error_type=type(e).__name__)
    return Response(status_code=status.HTTP_400_BAD_REQUEST)


@router.get("/health", response_class=PlainTextResponse)
async def health() -> str:
    """Liveness check; touches no dependencies."""
    return HEALTH_MESSAGE


@router.get("/me", response_model=UserSummary)
async def get_me(current_user: User = Depends(get_current_user)) -> UserSummary:
    """Get the user named by the Bearer token."""
    return UserSummary(
        id=current_user.id,
        email=current_user.email,
        first_name=current_user.first_name,
        last_name=current_user.last_name,
        active=current_user.is_active,
        created_at=current_user.created_at,
        updated_at=current_user.updated_at,
    )
