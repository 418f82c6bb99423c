"""
Auth services - orchestration, refresh sessions and domain errors.
"""

from app.services.auth.auth_service import AuthService
from app.services.auth.session_manager import SessionManager, SessionNotFoundError
from app.services.auth.token_hasher import TokenHasher

__all__ = ["AuthService", "SessionManager", "SessionNotFoundError", "TokenHasher"]
