"""API package exports."""

from login_api.api.auth import router
from login_api.api.middleware import CorrelationIdMiddleware

__all__ = ["router", "CorrelationIdMiddleware"]
