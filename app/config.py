"""
Kushfinds application settings.

Extends the base settings with Kushfinds-specific configuration.
"""

from typing import Optional
from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Kushfinds-specific settings."""

    # ==========================================================================
    # API
    # ==========================================================================
    API_PREFIX: str = "/api"

    # ==========================================================================
    # Refresh Token Cookie
    # ==========================================================================
    REFRESH_TOKEN_COOKIE_NAME: str = "refresh-token"
    REFRESH_TOKEN_COOKIE_PATH: str = "/api/auth"
    REFRESH_TOKEN_COOKIE_SECURE: bool = True
    REFRESH_TOKEN_COOKIE_SAMESITE: str = "lax"  # lax, strict, none

    # ==========================================================================
    # Email Settings (verification codes)
    # ==========================================================================
    EMAIL_MODE: str = "console"  # console, smtp, resend
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 465
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: str = "noreply@kushfinds.com"
    SMTP_FROM_NAME: str = "Kushfinds"
    RESEND_API_KEY: Optional[str] = None


# Global settings instance
settings = Settings()
