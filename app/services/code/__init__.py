"""
Verification code services.
"""

from app.services.code.code_service import (
    CodeService,
    CodeType,
    CodeServiceError,
    CodeAlreadySentError,
    CodeNotFoundError,
)

__all__ = [
    "CodeService",
    "CodeType",
    "CodeServiceError",
    "CodeAlreadySentError",
    "CodeNotFoundError",
]
