"""
User directory services.
"""

from app.services.user.user_service import UserService, UserAlreadyExistsError

__all__ = ["UserService", "UserAlreadyExistsError"]
