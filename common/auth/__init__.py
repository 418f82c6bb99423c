"""
Authentication module - JWT access tokens and password hashing.
"""

from common.auth.jwt_auth import JWTManager, InvalidTokenError
from common.auth.password_hasher import PasswordHasher

__all__ = ["JWTManager", "InvalidTokenError", "PasswordHasher"]
