"""
Authentication for protected routes.

Resolves the bearer access token into an explicit principal that handlers
receive as a parameter.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from common.auth import JWTManager, InvalidTokenError
from common.utils.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthPrincipal:
    """The authenticated caller."""
    user_id: int


class AuthMiddleware:
    """
    Validates access tokens.
    """

    def __init__(self, jwt_manager: JWTManager):
        """
        Initialize AuthMiddleware.

        Args:
            jwt_manager: For access token verification
        """
        self._jwt_manager = jwt_manager

    def require_auth(self, request: Request) -> AuthPrincipal:
        """
        Validate request is authenticated.

        Args:
            request: HTTP request object

        Returns:
            The authenticated principal

        Raises:
            UnauthorizedException: Missing, malformed, badly signed or expired
                token. The client always gets the same error.
        """
        token = self._extract_token(request)

        if not token:
            raise UnauthorizedException(
                message="Authentication required",
                code="AUTH_REQUIRED"
            )

        try:
            user_id = self._jwt_manager.parse_token(token)
        except InvalidTokenError as e:
            logger.debug(f"Rejected access token: {e}")
            raise UnauthorizedException(
                message="Authentication required",
                code="AUTH_REQUIRED"
            )

        return AuthPrincipal(user_id=user_id)

    def _extract_token(self, request: Request) -> Optional[str]:
        """
        Extract bearer token from Authorization header.

        Args:
            request: HTTP request object

        Returns:
            Token string if present and valid format, None otherwise

        Expected format: "Authorization: Bearer <token>"
        """
        auth_header = request.headers.get("Authorization")

        if not auth_header:
            return None

        parts = auth_header.split()

        if len(parts) != 2:
            return None

        scheme, token = parts

        if scheme.lower() != "bearer":
            return None

        return token
