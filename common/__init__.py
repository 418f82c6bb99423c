"""
Common library for reusable infrastructure components.

This package provides generic modules that can be used across projects:

- database: Async MongoDB connection and transaction coordinator
- auth: JWT access tokens and bcrypt password hashing
- utils: Standard responses and exceptions
- config: Base settings class
"""

from common.database import MongoDB, TransactionManager
from common.auth import JWTManager, InvalidTokenError, PasswordHasher
from common.utils import (
    success_response,
    error_response,
    APIException,
    BadRequestException,
    UnauthorizedException,
    NotFoundException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    "TransactionManager",
    # Auth
    "JWTManager",
    "InvalidTokenError",
    "PasswordHasher",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "NotFoundException",
    # Config
    "BaseAppSettings",
]
