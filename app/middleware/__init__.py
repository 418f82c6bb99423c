"""
Kushfinds middleware.
"""

from app.middleware.auth import AuthMiddleware, AuthPrincipal
from app.middleware.request_logging import RequestLoggingMiddleware

__all__ = ["AuthMiddleware", "AuthPrincipal", "RequestLoggingMiddleware"]
