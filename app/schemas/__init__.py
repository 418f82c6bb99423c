"""
Request schemas.
"""

from app.schemas.auth import (
    EmailRequest,
    VerifyEmailRequest,
    LoginRequest,
    SaveProfileInfoRequest,
    SavePasswordRequest,
)
from app.schemas.user import UpdateProfileRequest

__all__ = [
    "EmailRequest",
    "VerifyEmailRequest",
    "LoginRequest",
    "SaveProfileInfoRequest",
    "SavePasswordRequest",
    "UpdateProfileRequest",
]
