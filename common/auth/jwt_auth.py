"""
JWT access token manager.

Mints short-lived HS256 access tokens carrying the user id and parses them
back. Refresh tokens are opaque server-side sessions and are not JWTs; this
module only exposes their configured lifetime.

Example:
    manager = JWTManager(
        secret="your-secret-key",
        access_token_expire_minutes=15,
        refresh_token_expire_days=30,
    )

    token = manager.generate_access_token(42)
    manager.parse_token(token)  # 42
"""

from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError


class InvalidTokenError(Exception):
    """Token is malformed, badly signed, expired or carries no user id."""


class JWTManager:
    """
    Stateless access token signing and verification.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 15,
        refresh_token_expire_days: int = 30,
    ):
        """
        Initialize JWT manager.

        Args:
            secret: Secret key for JWT signing (keep this secure!)
            algorithm: JWT algorithm (default: HS256)
            access_token_expire_minutes: Access token lifetime
            refresh_token_expire_days: Refresh session lifetime
        """
        self.secret = secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)
        self.refresh_token_expire = timedelta(days=refresh_token_expire_days)

    @property
    def refresh_token_ttl(self) -> timedelta:
        """Lifetime of a refresh session."""
        return self.refresh_token_expire

    def generate_access_token(self, user_id: int) -> str:
        """Create a signed access token for the user."""
        expire = datetime.now(timezone.utc) + self.access_token_expire
        payload = {
            "user_id": user_id,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def parse_token(self, token: str) -> int:
        """
        Verify a token and return the user id it carries.

        Args:
            token: Encoded JWT

        Returns:
            The user id claim

        Raises:
            InvalidTokenError: For any signature, expiry or claim problem.
                The reason is kept on the exception for logging only.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require_exp": True},
            )
        except JWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        user_id = payload.get("user_id")
        # bool is an int subclass
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidTokenError("Invalid token: missing user_id claim")

        return user_id
