"""FastAPI application initialization."""

from contextlib import asynccontextmanager
from typing import Optional
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from login_api.api.auth import LOGIN_PATH
from login_api.api.auth import router as auth_router
from login_api.api.middleware import CorrelationIdMiddleware
from login_api.config import Settings, get_settings
from login_api.services.auth_service import AuthService
from login_api.services.credential_store import CredentialStore, PostgresCredentialStore
from login_api.services.logging_service import configure_logging, get_logger
from login_api.services.password_service import PasswordHasher
from login_api.services.token_service import TokenService


def build_auth_service(settings: Settings, store: CredentialStore) -> AuthService:
    """Wire the auth workflow from settings and a credential store."""
    token_service = TokenService(
        secret=settings.jwt_secret,
        expiration_ms=settings.jwt_expiration_ms,
    )
    password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    return AuthService(store, token_service, password_hasher)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CredentialStore] = None,
) -> FastAPI:
    """Create the application.

    Args:
        settings: Settings to use (defaults to environment-loaded settings)
        store: Pre-built credential store; when omitted, a Postgres-backed
            store is created at startup

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown events."""
        configure_logging(settings.log_level)
        logger = get_logger("main")

        owns_database = store is None
        if owns_database:
            from login_api.database import init_database, run_migrations

            pool = await init_database(settings.postgres_url)
            await run_migrations(pool)
            credential_store: CredentialStore = PostgresCredentialStore(pool)
            logger.info("database_initialized")
        else:
            credential_store = store

        app.state.auth_service = build_auth_service(settings, credential_store)

        logger.info(
            "application_started",
            log_level=settings.log_level,
            expiry_window_ms=settings.jwt_expiration_ms,
        )

        yield

        if owns_database:
            from login_api.database import close_database

            await close_database()

        logger.info("application_shutdown")

    app = FastAPI(
        title="Login API",
        description="Email/password signup and login issuing signed bearer tokens",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> Response:
        """Reject malformed request bodies with a bare status code.

        A malformed login is a failed login (401); anything else is 400.
        Field-level detail is logged against the correlation ID but never
        returned to the client.
        """
        correlation_id = getattr(request.state, "correlation_id", None) or str(uuid4())
        logger = structlog.get_logger()

        errors = exc.errors()
        fields = [".".join(str(loc) for loc in e.get("loc", ["unknown"])) for e in errors]

        logger.warning(
            "validation_error",
            correlation_id=correlation_id,
            path=request.url.path,
            fields=fields,
        )

        status_code = 401 if request.url.path == LOGIN_PATH else 400

        return Response(
            status_code=status_code,
            headers={"X-Correlation-Id": correlation_id},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(auth_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("login_api.main:app", host="0.0.0.0", port=8080)
