"""
Configuration module - App-wide constants.
"""

from config.email_config import (
    RESEND_API_URL,
    EMAIL_DEFAULTS,
    VERIFICATION_SUBJECT,
    VERIFICATION_BODY,
)

__all__ = [
    "RESEND_API_URL",
    "EMAIL_DEFAULTS",
    "VERIFICATION_SUBJECT",
    "VERIFICATION_BODY",
]
